from typing import List, Optional, Protocol

from app.domain.models.file import File


class FileRepository(Protocol):
    """文件模型数据仓库"""

    async def create(self, file: File) -> File:
        """新增文件记录，返回带有存储层id的文件信息"""
        ...

    async def get_by_id(self, file_id: str) -> Optional[File]:
        """根据传递的文件id获取文件信息"""
        ...

    async def get_by_id_and_owner(self, file_id: str, user_id: str) -> Optional[File]:
        """根据文件id+所属用户获取文件信息"""
        ...

    async def list_by_parent(
        self, user_id: str, parent_id: str, skip: int, limit: int
    ) -> List[File]:
        """按id升序分页获取用户在指定目录下的文件"""
        ...

    async def set_public(
        self, file_id: str, user_id: str, is_public: bool
    ) -> Optional[File]:
        """原子更新文件的公开状态，返回更新后的文件信息"""
        ...

    async def count(self) -> int:
        """获取文件总数"""
        ...
