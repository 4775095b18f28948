"""用户仓储接口"""

from abc import ABC, abstractmethod
from typing import Optional

from app.domain.models.user import User


class UserRepository(ABC):
    """用户仓储抽象接口"""

    @abstractmethod
    async def create(self, user: User) -> User:
        """创建用户"""
        pass

    @abstractmethod
    async def get_by_id(self, user_id: str) -> Optional[User]:
        """根据 ID 获取用户"""
        pass

    @abstractmethod
    async def get_by_email(self, email: str) -> Optional[User]:
        """根据邮箱获取用户"""
        pass

    @abstractmethod
    async def count(self) -> int:
        """获取用户总数"""
        pass
