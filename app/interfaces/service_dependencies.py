import logging

from app.application.services.auth_service import AuthService
from app.application.services.file_service import FileService
from app.application.services.status_service import StatusService
from app.application.services.thumbnail_service import ThumbnailService
from app.application.services.user_service import UserService
from app.infrastructure.external.file_storage.local_file_storage import LocalFileStorage
from app.infrastructure.external.health_checker.postgres_health_checker import (
    PostgresHealthChecker,
)
from app.infrastructure.external.health_checker.redis_health_checker import (
    RedisHealthChecker,
)
from app.infrastructure.external.image.pillow_thumbnailer import PillowThumbnailer
from app.infrastructure.external.message_queue.redis_stream_message_queue import (
    RedisStreamMessageQueue,
)
from app.infrastructure.external.session_store.redis_session_store import (
    RedisSessionStore,
)
from app.infrastructure.storage.postgres import Postgres, get_postgres, get_uow
from app.infrastructure.storage.redis import RedisClient, get_redis
from core.config import get_settings
from fastapi import Depends

logger = logging.getLogger(__name__)
settings = get_settings()


def get_file_storage() -> LocalFileStorage:
    """获取本地文件内容存储"""
    return LocalFileStorage(root=settings.folder_path)


def get_message_queue(
    redis_client: RedisClient = Depends(get_redis),
) -> RedisStreamMessageQueue:
    """获取缩略图任务队列"""
    return RedisStreamMessageQueue(
        redis_client=redis_client,
        stream_name=settings.thumbnail_stream,
        group_name=settings.thumbnail_consumer_group,
        reclaim_idle_ms=settings.reclaim_idle_ms,
    )


def get_thumbnail_service(
    file_storage: LocalFileStorage = Depends(get_file_storage),
    message_queue: RedisStreamMessageQueue = Depends(get_message_queue),
) -> ThumbnailService:
    return ThumbnailService(
        uow_factory=get_uow,
        file_storage=file_storage,
        thumbnailer=PillowThumbnailer(),
        message_queue=message_queue,
    )


def get_file_service(
    file_storage: LocalFileStorage = Depends(get_file_storage),
    thumbnail_service: ThumbnailService = Depends(get_thumbnail_service),
) -> FileService:
    return FileService(
        uow_factory=get_uow,
        file_storage=file_storage,
        thumbnail_service=thumbnail_service,
        store_timeout_seconds=settings.store_timeout_seconds,
    )


def get_auth_service(
    redis_client: RedisClient = Depends(get_redis),
) -> AuthService:
    """获取认证服务"""
    session_store = RedisSessionStore(
        redis_client=redis_client,
        key_prefix=settings.session_key_prefix,
    )
    return AuthService(
        uow_factory=get_uow,
        session_store=session_store,
        session_ttl_seconds=settings.session_ttl_seconds,
        store_timeout_seconds=settings.store_timeout_seconds,
    )


def get_user_service() -> UserService:
    return UserService(
        uow_factory=get_uow,
        store_timeout_seconds=settings.store_timeout_seconds,
    )


def get_status_service(
    postgres: Postgres = Depends(get_postgres),
    redis_client: RedisClient = Depends(get_redis),
) -> StatusService:
    """获取状态服务"""
    # 1.初始化postgres和redis健康检查器
    checkers = [RedisHealthChecker(redis_client), PostgresHealthChecker(postgres)]

    # 2.创建服务并返回
    return StatusService(
        checkers=checkers,
        uow_factory=get_uow,
        store_timeout_seconds=settings.store_timeout_seconds,
    )
