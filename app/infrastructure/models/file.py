from datetime import datetime
from typing import Optional

from sqlalchemy import (
    BigInteger,
    Boolean,
    DateTime,
    ForeignKey,
    Identity,
    Index,
    PrimaryKeyConstraint,
    String,
    text,
)
from sqlalchemy.orm import Mapped, mapped_column

from ...domain.models.file import MAX_NAME_LENGTH, ROOT_PARENT_ID, File, FileType
from .base import Base


class FileModel(Base):
    """文件数据ORM模型，id自增以保证按插入顺序排序"""

    __tablename__ = "files"
    __table_args__ = (
        PrimaryKeyConstraint("id", name="pk_files_id"),
        Index("ix_files_user_id_parent_id_id", "user_id", "parent_id", "id"),
    )

    id: Mapped[int] = mapped_column(
        BigInteger,
        Identity(always=False),
        nullable=False,
    )  # 文件id
    user_id: Mapped[str] = mapped_column(
        String(255),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )  # 文件所属用户ID
    name: Mapped[str] = mapped_column(String(MAX_NAME_LENGTH), nullable=False)  # 文件名字
    type: Mapped[str] = mapped_column(String(16), nullable=False)  # folder/file/image
    is_public: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        server_default=text("false"),
    )
    parent_id: Mapped[int] = mapped_column(
        BigInteger,
        nullable=False,
        server_default=text("0"),
    )  # 0表示根目录
    local_path: Mapped[Optional[str]] = mapped_column(
        String(512),
        nullable=True,
    )  # 内容存储key
    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        nullable=False,
        server_default=text("CURRENT_TIMESTAMP(0)"),
    )  # 创建时间

    @classmethod
    def from_domain(cls, file: File) -> "FileModel":
        """从领域模型创建ORM模型，id由数据库生成"""
        return cls(
            user_id=file.user_id,
            name=file.name,
            type=file.type.value,
            is_public=file.is_public,
            parent_id=int(file.parent_id),
            local_path=file.local_path,
        )

    def to_domain(self) -> File:
        """将ORM模型转换为领域模型，不合法的记录直接抛出校验异常"""
        return File(
            id=str(self.id),
            user_id=self.user_id,
            name=self.name,
            type=FileType(self.type),
            is_public=bool(self.is_public),
            parent_id=str(self.parent_id) if self.parent_id else ROOT_PARENT_ID,
            local_path=self.local_path,
        )
