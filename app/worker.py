"""缩略图worker进程入口：python -m app.worker"""

import asyncio
import logging
import signal

from app.application.services.thumbnail_service import ThumbnailService, ThumbnailWorker
from app.infrastructure.external.file_storage.local_file_storage import LocalFileStorage
from app.infrastructure.external.image.pillow_thumbnailer import PillowThumbnailer
from app.infrastructure.external.message_queue.redis_stream_message_queue import (
    RedisStreamMessageQueue,
)
from app.infrastructure.logging import setup_logging
from app.infrastructure.storage.postgres import get_postgres, get_uow
from app.infrastructure.storage.redis import get_redis
from core.config import get_settings

logger = logging.getLogger(__name__)


async def run_worker() -> None:
    settings = get_settings()

    # 1.初始化Redis与Postgres客户端
    redis_client = get_redis()
    await redis_client.init()
    postgres_client = get_postgres()
    await postgres_client.init()

    try:
        # 2.准备消息队列与消费者组
        message_queue = RedisStreamMessageQueue(
            redis_client=redis_client,
            stream_name=settings.thumbnail_stream,
            group_name=settings.thumbnail_consumer_group,
            reclaim_idle_ms=settings.reclaim_idle_ms,
        )
        await message_queue.ensure_group()

        # 3.构建缩略图服务与worker
        thumbnail_service = ThumbnailService(
            uow_factory=get_uow,
            file_storage=LocalFileStorage(root=settings.folder_path),
            thumbnailer=PillowThumbnailer(),
            message_queue=message_queue,
        )
        worker = ThumbnailWorker(
            thumbnail_service=thumbnail_service,
            message_queue=message_queue,
            concurrency=settings.worker_concurrency,
            job_timeout_seconds=settings.job_timeout_seconds,
            block_ms=settings.worker_block_ms,
        )

        # 4.收到SIGINT/SIGTERM时停止消费
        loop = asyncio.get_running_loop()
        for sig in (signal.SIGINT, signal.SIGTERM):
            loop.add_signal_handler(sig, lambda: asyncio.create_task(worker.stop()))

        logger.info(
            f"缩略图worker已启动，队列: {settings.thumbnail_stream}，并发数: {settings.worker_concurrency}"
        )
        await worker.run()
    finally:
        # 5.释放资源
        await redis_client.shutdown()
        await postgres_client.shutdown()
        logger.info("缩略图worker已退出")


def main() -> None:
    setup_logging()
    asyncio.run(run_worker())


if __name__ == "__main__":
    main()
