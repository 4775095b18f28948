"""用户相关 Schema"""

from typing import Optional

from app.domain.models.user import User
from pydantic import BaseModel


class CreateUserRequest(BaseModel):
    """注册请求，字段缺失由服务层返回具体的错误信息"""

    email: Optional[str] = None
    password: Optional[str] = None


class UserView(BaseModel):
    """用户对外展示结构"""

    id: str
    email: str

    @classmethod
    def from_domain(cls, user: User) -> "UserView":
        return cls(id=user.id, email=user.email)
