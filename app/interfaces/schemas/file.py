"""文件相关 Schema"""

from typing import Any, Optional

from app.domain.models.file import ROOT_PARENT_ID, File
from pydantic import BaseModel, ConfigDict, Field


class CreateFileRequest(BaseModel):
    """上传文件/创建文件夹请求，字段缺失由服务层返回具体的错误信息"""

    model_config = ConfigDict(populate_by_name=True)

    name: Optional[str] = None
    type: Optional[str] = None
    parent_id: Any = Field(default=None, alias="parentId")
    is_public: bool = Field(default=False, alias="isPublic")
    data: Optional[str] = None


class FileView(BaseModel):
    """文件对外展示结构"""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    user_id: str = Field(alias="userId")
    name: str
    type: str
    is_public: bool = Field(alias="isPublic")
    parent_id: Any = Field(alias="parentId")  # 根目录为0，否则为字符串id

    @classmethod
    def from_domain(cls, file: File) -> "FileView":
        return cls(
            id=file.id,
            user_id=file.user_id,
            name=file.name,
            type=file.type.value,
            is_public=file.is_public,
            parent_id=0 if file.parent_id == ROOT_PARENT_ID else file.parent_id,
        )
