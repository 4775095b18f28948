"""认证依赖模块"""

from typing import Annotated, Optional

from app.application.errors.exceptions import UnauthorizedError
from app.application.services.auth_service import AuthService
from app.domain.models.user import User
from app.interfaces.service_dependencies import get_auth_service
from fastapi import Depends, Header


async def get_token(
    x_token: Annotated[Optional[str], Header(alias="X-Token")] = None,
) -> Optional[str]:
    """从X-Token请求头中获取会话token"""
    return x_token or None


async def get_current_user_optional(
    token: Annotated[Optional[str], Depends(get_token)],
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
) -> Optional[User]:
    """获取当前登录用户（可选），未登录时返回None"""
    return await auth_service.resolve_caller(token)


async def get_current_user(
    user: Annotated[Optional[User], Depends(get_current_user_optional)],
) -> User:
    """获取当前登录用户

    Raises:
        UnauthorizedError: 401 未授权
    """
    if user is None:
        raise UnauthorizedError()
    return user


# 类型别名，方便使用
Token = Annotated[Optional[str], Depends(get_token)]
CurrentUser = Annotated[User, Depends(get_current_user)]
OptionalUser = Annotated[Optional[User], Depends(get_current_user_optional)]
