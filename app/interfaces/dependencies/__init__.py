"""依赖模块"""

from .auth import (
    CurrentUser,
    OptionalUser,
    Token,
    get_current_user,
    get_current_user_optional,
    get_token,
)

__all__ = [
    "get_token",
    "get_current_user",
    "get_current_user_optional",
    "Token",
    "CurrentUser",
    "OptionalUser",
]
