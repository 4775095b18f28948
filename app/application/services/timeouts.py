import asyncio
import logging
from typing import Awaitable, TypeVar

from app.application.errors.exceptions import StoreTimeoutError

logger = logging.getLogger(__name__)

T = TypeVar("T")


async def with_store_timeout(
    awaitable: Awaitable[T], timeout_seconds: float, operation: str
) -> T:
    """为一次存储层调用加上超时限制，超时后抛出StoreTimeoutError"""
    try:
        return await asyncio.wait_for(awaitable, timeout=timeout_seconds)
    except asyncio.TimeoutError:
        logger.error(f"存储操作[{operation}]超过{timeout_seconds}秒未响应")
        raise StoreTimeoutError(f"Storage timeout: {operation}")
