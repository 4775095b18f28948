from app.domain.external.health_checker import HealthChecker
from app.domain.models.health_status import HealthStatus
from app.infrastructure.storage.redis import RedisClient


class RedisHealthChecker(HealthChecker):
    """Redis health checker"""

    service_name = "redis"

    def __init__(self, redis_client: RedisClient) -> None:
        self._redis_client = redis_client

    async def check(self) -> HealthStatus:
        """Ping Redis to verify connectivity."""
        if await self._redis_client.is_available():
            return HealthStatus(service=self.service_name, status="ok")
        return HealthStatus(
            service=self.service_name,
            status="error",
            details="redis unavailable",
        )
