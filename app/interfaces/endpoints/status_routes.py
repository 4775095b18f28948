import logging

from app.application.services.status_service import StatusService
from app.interfaces.schemas.status import StatsResponse, StatusResponse
from app.interfaces.service_dependencies import get_status_service
from fastapi import APIRouter, Depends

logger = logging.getLogger(__name__)
router = APIRouter(tags=["状态模块"])


@router.get(
    "/status",
    response_model=StatusResponse,
    summary="系统健康检查",
    description="检查redis与postgres是否可用",
)
async def get_status(
    status_service: StatusService = Depends(get_status_service),
) -> StatusResponse:
    statuses = await status_service.get_status()
    return StatusResponse(
        redis=statuses.get("redis", False),
        db=statuses.get("db", False),
    )


@router.get(
    "/stats",
    response_model=StatsResponse,
    summary="统计信息",
    description="获取用户数与文件数",
)
async def get_stats(
    status_service: StatusService = Depends(get_status_service),
) -> StatsResponse:
    return StatsResponse(**await status_service.get_stats())
