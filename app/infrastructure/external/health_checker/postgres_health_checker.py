from app.domain.external.health_checker import HealthChecker
from app.domain.models.health_status import HealthStatus
from app.infrastructure.storage.postgres import Postgres


class PostgresHealthChecker(HealthChecker):
    """Postgres健康检查器"""

    service_name = "db"

    def __init__(self, postgres: Postgres) -> None:
        self._postgres = postgres

    async def check(self) -> HealthStatus:
        """执行一段简单的sql，用于判断数据库服务是否正常"""
        if await self._postgres.is_available():
            return HealthStatus(service=self.service_name, status="ok")
        return HealthStatus(
            service=self.service_name,
            status="error",
            details="postgres unavailable",
        )
