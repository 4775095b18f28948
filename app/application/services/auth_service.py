"""认证服务：基于会话token解析调用方、Basic认证登录与登出"""

import logging
import uuid
from typing import Callable, Optional

from app.application.errors.exceptions import UnauthorizedError
from app.application.services.timeouts import with_store_timeout
from app.domain.external.session_store import SessionStore
from app.domain.models.file import File
from app.domain.models.user import User
from app.domain.repositories.uow import IUnitOfWork
from core.security import decode_basic_auth, verify_password

logger = logging.getLogger(__name__)


def authorize_view(caller: Optional[User], file: File) -> bool:
    """判断调用方能否查看文件：公开文件或调用方是文件所有者"""
    if file.is_public:
        return True
    return caller is not None and file.is_owned_by(caller.id)


class AuthService:
    """认证服务，负责会话token与用户之间的映射"""

    def __init__(
        self,
        uow_factory: Callable[[], IUnitOfWork],
        session_store: SessionStore,
        session_ttl_seconds: int = 24 * 3600,
        store_timeout_seconds: float = 10.0,
    ) -> None:
        self._uow_factory = uow_factory
        self._session_store = session_store
        self._session_ttl_seconds = session_ttl_seconds
        self._store_timeout_seconds = store_timeout_seconds

    async def _load_user(self, user_id: str) -> Optional[User]:
        async with self._uow_factory() as uow:
            return await uow.user.get_by_id(user_id)

    async def resolve_caller(self, token: Optional[str]) -> Optional[User]:
        """根据token解析调用方

        token缺失、会话过期、会话存储或用户存储不可用时都返回None，
        调用方统一按未登录处理。
        """
        if not token:
            return None

        # 1.从会话存储中查询token对应的用户id
        try:
            user_id = await with_store_timeout(
                self._session_store.get(token),
                self._store_timeout_seconds,
                "session.get",
            )
        except Exception as e:
            logger.error(f"查询会话失败，按未登录处理: {str(e)}")
            return None
        if not user_id:
            return None

        # 2.加载用户信息
        try:
            return await with_store_timeout(
                self._load_user(user_id),
                self._store_timeout_seconds,
                "user.get_by_id",
            )
        except Exception as e:
            logger.error(f"加载会话用户[{user_id}]失败，按未登录处理: {str(e)}")
            return None

    async def connect(self, authorization: Optional[str]) -> str:
        """使用Basic认证头登录，返回新的会话token"""
        # 1.解析Basic认证头
        credentials = decode_basic_auth(authorization)
        if credentials is None:
            raise UnauthorizedError()
        email, password = credentials

        # 2.根据邮箱查询用户并校验密码
        async with self._uow_factory() as uow:
            user = await with_store_timeout(
                uow.user.get_by_email(email),
                self._store_timeout_seconds,
                "user.get_by_email",
            )
        if user is None or not verify_password(password, user.password_hash):
            raise UnauthorizedError()

        # 3.生成token并写入会话存储
        token = str(uuid.uuid4())
        await with_store_timeout(
            self._session_store.set(token, user.id, self._session_ttl_seconds),
            self._store_timeout_seconds,
            "session.set",
        )
        logger.info(f"用户[{user.id}]登录成功")
        return token

    async def disconnect(self, token: Optional[str]) -> None:
        """登出，删除token对应的会话"""
        user = await self.resolve_caller(token)
        if user is None:
            raise UnauthorizedError()

        await with_store_timeout(
            self._session_store.delete(token),
            self._store_timeout_seconds,
            "session.delete",
        )
        logger.info(f"用户[{user.id}]已登出")
