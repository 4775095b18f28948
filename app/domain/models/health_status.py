from typing import Optional

from pydantic import BaseModel


class HealthStatus(BaseModel):
    """单个依赖服务的健康状态"""

    service: str
    status: str  # ok / error
    details: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status == "ok"
