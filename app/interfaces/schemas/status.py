from pydantic import BaseModel


class StatusResponse(BaseModel):
    """依赖服务可用性"""

    redis: bool
    db: bool


class StatsResponse(BaseModel):
    """用户与文件数量"""

    users: int
    files: int
