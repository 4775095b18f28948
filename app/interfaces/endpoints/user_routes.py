"""用户路由"""

from app.application.services.user_service import UserService
from app.interfaces.dependencies import CurrentUser
from app.interfaces.schemas.user import CreateUserRequest, UserView
from app.interfaces.service_dependencies import get_user_service
from fastapi import APIRouter, Depends, status

router = APIRouter(prefix="/users", tags=["用户模块"])


@router.post(
    "",
    response_model=UserView,
    status_code=status.HTTP_201_CREATED,
    summary="注册用户",
)
async def create_user(
    request: CreateUserRequest,
    user_service: UserService = Depends(get_user_service),
) -> UserView:
    user = await user_service.register(request.email, request.password)
    return UserView.from_domain(user)


@router.get("/me", response_model=UserView, summary="获取当前用户信息")
async def get_me(current_user: CurrentUser) -> UserView:
    return UserView.from_domain(current_user)
