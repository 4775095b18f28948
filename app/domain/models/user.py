"""用户领域模型"""

from datetime import datetime
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field


class User(BaseModel):
    """用户领域模型，id为不透明的字符串标识"""

    model_config = ConfigDict(from_attributes=True)

    id: str = Field(default_factory=lambda: str(uuid4()))
    email: str
    password_hash: str = ""
    created_at: datetime = Field(default_factory=datetime.now)
