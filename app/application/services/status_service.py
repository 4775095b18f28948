import asyncio
import logging
from typing import Callable, Dict, List

from app.application.services.timeouts import with_store_timeout
from app.domain.external.health_checker import HealthChecker
from app.domain.models.health_status import HealthStatus
from app.domain.repositories.uow import IUnitOfWork

logger = logging.getLogger(__name__)


class StatusService:
    """状态服务：汇总各后端服务的健康检查与数据统计"""

    def __init__(
        self,
        checkers: List[HealthChecker],
        uow_factory: Callable[[], IUnitOfWork],
        store_timeout_seconds: float = 10.0,
    ) -> None:
        """构造函数，传入健康检查器列表"""
        self._checkers = checkers
        self._uow_factory = uow_factory
        self._store_timeout_seconds = store_timeout_seconds

    async def check_all(self) -> List[HealthStatus]:
        """并发执行所有健康检查并返回结果"""
        results = await asyncio.gather(
            *(checker.check() for checker in self._checkers),
            return_exceptions=True,
        )

        statuses: List[HealthStatus] = []
        for checker, result in zip(self._checkers, results):
            if isinstance(result, Exception):
                service = getattr(checker, "service_name", checker.__class__.__name__)
                logger.error(f"{service} health check failed: {str(result)}")
                statuses.append(
                    HealthStatus(service=str(service), status="error", details=str(result))
                )
            else:
                statuses.append(result)
        return statuses

    async def get_status(self) -> Dict[str, bool]:
        """以服务名为key返回各后端服务是否可用"""
        return {status.service: status.ok for status in await self.check_all()}

    async def get_stats(self) -> Dict[str, int]:
        """统计用户数与文件数"""

        async def _count() -> Dict[str, int]:
            async with self._uow_factory() as uow:
                return {
                    "users": await uow.user.count(),
                    "files": await uow.file.count(),
                }

        return await with_store_timeout(
            _count(), self._store_timeout_seconds, "stats.count"
        )
