"""认证路由"""

import logging
from typing import Annotated, Optional

from app.application.services.auth_service import AuthService
from app.interfaces.dependencies import Token
from app.interfaces.schemas.auth import ConnectResponse
from app.interfaces.service_dependencies import get_auth_service
from fastapi import APIRouter, Depends, Header, Response, status

logger = logging.getLogger(__name__)
router = APIRouter(tags=["认证模块"])


@router.get(
    "/connect",
    response_model=ConnectResponse,
    summary="登录",
    description="使用Basic认证(邮箱:密码)登录，返回会话token",
)
async def connect(
    authorization: Annotated[Optional[str], Header()] = None,
    auth_service: AuthService = Depends(get_auth_service),
) -> ConnectResponse:
    token = await auth_service.connect(authorization)
    return ConnectResponse(token=token)


@router.get(
    "/disconnect",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="登出",
    description="删除X-Token对应的会话",
)
async def disconnect(
    token: Token,
    auth_service: AuthService = Depends(get_auth_service),
) -> Response:
    await auth_service.disconnect(token)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
