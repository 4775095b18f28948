"""用户 ORM 模型"""

import uuid
from datetime import datetime

from app.domain.models.user import User
from sqlalchemy import DateTime, PrimaryKeyConstraint, String, text
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base


class UserModel(Base):
    """用户数据 ORM 模型"""

    __tablename__ = "users"
    __table_args__ = (PrimaryKeyConstraint("id", name="pk_users_id"),)

    id: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        default=lambda: str(uuid.uuid4()),
    )
    email: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        unique=True,
    )
    password_hash: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        nullable=False,
        server_default=text("CURRENT_TIMESTAMP(0)"),
    )

    @classmethod
    def from_domain(cls, user: User) -> "UserModel":
        """从领域模型创建 ORM 模型"""
        return cls(
            id=user.id,
            email=user.email,
            password_hash=user.password_hash,
            created_at=user.created_at,
        )

    def to_domain(self) -> User:
        """将 ORM 模型转换为领域模型"""
        return User.model_validate(self, from_attributes=True)
