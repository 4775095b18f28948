import logging
from typing import Callable, Optional

from app.application.errors.exceptions import ValidationError
from app.application.services.timeouts import with_store_timeout
from app.domain.models.user import User
from app.domain.repositories.uow import IUnitOfWork
from core.security import get_password_hash

logger = logging.getLogger(__name__)


class UserService:
    """用户服务，只负责注册"""

    def __init__(
        self,
        uow_factory: Callable[[], IUnitOfWork],
        store_timeout_seconds: float = 10.0,
    ) -> None:
        self._uow_factory = uow_factory
        self._store_timeout_seconds = store_timeout_seconds

    async def _create(self, email: str, password: str) -> User:
        async with self._uow_factory() as uow:
            if await uow.user.get_by_email(email) is not None:
                raise ValidationError("Already exist")
            user = User(email=email, password_hash=get_password_hash(password))
            return await uow.user.create(user)

    async def register(self, email: Optional[str], password: Optional[str]) -> User:
        """注册新用户，邮箱唯一"""
        if not email:
            raise ValidationError("Missing email")
        if not password:
            raise ValidationError("Missing password")

        user = await with_store_timeout(
            self._create(email, password),
            self._store_timeout_seconds,
            "user.create",
        )
        logger.info(f"User registered: {user.id}")
        return user
