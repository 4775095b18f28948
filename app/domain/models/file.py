"""文件树领域模型"""

import re
from enum import Enum
from typing import Any, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, model_validator

# 根目录的父级哨兵值
ROOT_PARENT_ID = "0"

# 缩略图宽度，按固定顺序生成
THUMBNAIL_WIDTHS = (500, 250, 100)

_FILE_ID_PATTERN = re.compile(r"[1-9][0-9]{0,18}")

# 文件id为有符号64位整数
MAX_FILE_ID = 2**63 - 1

# 文件名的最大长度，与数据库字段长度一致
MAX_NAME_LENGTH = 255


class FileType(str, Enum):
    """文件类型枚举"""

    FOLDER = "folder"
    FILE = "file"
    IMAGE = "image"


def parse_file_id(value: Any) -> Optional[str]:
    """将外部传入的值解析为存储层的文件id，无法解析时返回None"""
    if value is None or isinstance(value, bool):
        return None
    candidate = str(value).strip()
    if not _FILE_ID_PATTERN.fullmatch(candidate) or int(candidate) > MAX_FILE_ID:
        return None
    return candidate


def is_root_parent(value: Any) -> bool:
    """判断传入的parentId是否指向根目录(缺省、0、"0"、空串)"""
    if value is None or value is False:
        return True
    if isinstance(value, int) and value == 0:
        return True
    return isinstance(value, str) and value.strip() in ("", ROOT_PARENT_ID)


class File(BaseModel):
    """文件信息Domain模型，文件夹/普通文件/图片共用一个结构"""

    id: Optional[str] = None  # 存储层分配的id，写入前为空
    user_id: str  # 文件所属用户ID
    name: str
    type: FileType
    is_public: bool = False
    parent_id: str = ROOT_PARENT_ID  # 根目录为"0"，否则为父文件夹id
    local_path: Optional[str] = None  # 内容存储key，文件夹没有

    @model_validator(mode="after")
    def check_content_path(self) -> "File":
        if not self.name:
            raise ValueError("file name must not be empty")
        if self.type == FileType.FOLDER and self.local_path is not None:
            raise ValueError("a folder must not have a content path")
        if self.type != FileType.FOLDER and not self.local_path:
            raise ValueError(f"a {self.type.value} must have a content path")
        return self

    @property
    def is_folder(self) -> bool:
        return self.type == FileType.FOLDER

    @property
    def is_root(self) -> bool:
        return self.parent_id == ROOT_PARENT_ID

    def is_owned_by(self, user_id: Optional[str]) -> bool:
        """检查文件是否属于指定用户"""
        return user_id is not None and self.user_id == user_id


class ThumbnailJob(BaseModel):
    """缩略图任务消息，每次上传图片时生成一条"""

    model_config = ConfigDict(frozen=True)

    file_id: str = Field(
        validation_alias=AliasChoices("fileId", "file_id"),
        serialization_alias="fileId",
    )
    owner_id: str = Field(
        validation_alias=AliasChoices("ownerId", "userId", "owner_id"),
        serialization_alias="ownerId",
    )

    def to_message(self) -> str:
        """序列化为队列中传输的JSON字符串"""
        return self.model_dump_json(by_alias=True)
