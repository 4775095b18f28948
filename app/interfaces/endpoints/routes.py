from fastapi import APIRouter

from . import auth_routes, file_routes, status_routes, user_routes


def create_api_routes() -> APIRouter:
    """创建API路由，涵盖整个项目的所有路由管理"""

    api_router = APIRouter()

    # 状态与统计路由 (无需认证)
    api_router.include_router(status_routes.router)

    # 认证相关路由
    api_router.include_router(auth_routes.router)

    # 用户路由
    api_router.include_router(user_routes.router)

    # 文件路由 (需要认证，内容读取除外)
    api_router.include_router(file_routes.router)

    return api_router


router = create_api_routes()
