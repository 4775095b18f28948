from typing import List, Optional

from app.domain.models.file import File
from app.domain.repositories.file_repository import FileRepository
from app.infrastructure.models import FileModel
from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession


class DBFileRepository(FileRepository):
    """基于数据库的文件数据仓库"""

    def __init__(self, db_session: AsyncSession) -> None:
        """构造函数，完成数据仓库初始化"""
        self.db_session = db_session

    async def create(self, file: File) -> File:
        """新增文件记录，flush后直接使用数据库生成的id构建返回值"""
        record = FileModel.from_domain(file)
        self.db_session.add(record)
        await self.db_session.flush()
        return record.to_domain()

    async def get_by_id(self, file_id: str) -> Optional[File]:
        """根据传递的文件id获取文件信息"""
        stmt = select(FileModel).where(FileModel.id == int(file_id))
        result = await self.db_session.execute(stmt)
        record = result.scalar_one_or_none()
        return record.to_domain() if record is not None else None

    async def get_by_id_and_owner(self, file_id: str, user_id: str) -> Optional[File]:
        """根据文件id+所属用户获取文件信息"""
        stmt = select(FileModel).where(
            FileModel.id == int(file_id),
            FileModel.user_id == user_id,
        )
        result = await self.db_session.execute(stmt)
        record = result.scalar_one_or_none()
        return record.to_domain() if record is not None else None

    async def list_by_parent(
        self, user_id: str, parent_id: str, skip: int, limit: int
    ) -> List[File]:
        """按id升序分页获取用户在指定目录下的文件"""
        stmt = (
            select(FileModel)
            .where(
                FileModel.user_id == user_id,
                FileModel.parent_id == int(parent_id),
            )
            .order_by(FileModel.id.asc())
            .offset(skip)
            .limit(limit)
        )
        result = await self.db_session.execute(stmt)
        return [record.to_domain() for record in result.scalars().all()]

    async def set_public(
        self, file_id: str, user_id: str, is_public: bool
    ) -> Optional[File]:
        """单条UPDATE ... RETURNING完成公开状态修改"""
        stmt = (
            update(FileModel)
            .where(
                FileModel.id == int(file_id),
                FileModel.user_id == user_id,
            )
            .values(is_public=is_public)
            .returning(FileModel)
            .execution_options(synchronize_session=False)
        )
        result = await self.db_session.execute(stmt)
        record = result.scalar_one_or_none()
        return record.to_domain() if record is not None else None

    async def count(self) -> int:
        """获取文件总数"""
        result = await self.db_session.execute(select(func.count(FileModel.id)))
        return result.scalar_one()
