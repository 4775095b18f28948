"""用户仓储实现"""

from typing import Optional

from app.domain.models.user import User
from app.domain.repositories.user_repository import UserRepository
from app.infrastructure.models.user import UserModel
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession


class DBUserRepository(UserRepository):
    """基于数据库的用户仓储实现"""

    def __init__(self, db_session: AsyncSession) -> None:
        """构造函数，完成数据仓储初始化"""
        self.db_session = db_session

    async def create(self, user: User) -> User:
        """创建用户"""
        record = UserModel.from_domain(user)
        self.db_session.add(record)
        await self.db_session.flush()
        return record.to_domain()

    async def get_by_id(self, user_id: str) -> Optional[User]:
        """根据 ID 获取用户"""
        stmt = select(UserModel).where(UserModel.id == user_id)
        result = await self.db_session.execute(stmt)
        record = result.scalar_one_or_none()
        return record.to_domain() if record else None

    async def get_by_email(self, email: str) -> Optional[User]:
        """根据邮箱获取用户"""
        stmt = select(UserModel).where(UserModel.email == email)
        result = await self.db_session.execute(stmt)
        record = result.scalar_one_or_none()
        return record.to_domain() if record else None

    async def count(self) -> int:
        """获取用户总数"""
        result = await self.db_session.execute(select(func.count(UserModel.id)))
        return result.scalar_one()
