import logging
from typing import Optional

from app.domain.external.session_store import SessionStore
from app.infrastructure.storage.redis import RedisClient

logger = logging.getLogger(__name__)


class RedisSessionStore(SessionStore):
    """基于Redis的会话存储，key为`<前缀><token>`，value为用户id"""

    def __init__(self, redis_client: RedisClient, key_prefix: str = "auth_") -> None:
        self._redis = redis_client
        self._key_prefix = key_prefix

    def _key(self, token: str) -> str:
        return f"{self._key_prefix}{token}"

    async def get(self, token: str) -> Optional[str]:
        return await self._redis.client.get(self._key(token))

    async def set(self, token: str, user_id: str, ttl_seconds: int) -> None:
        await self._redis.client.set(self._key(token), user_id, ex=ttl_seconds)

    async def delete(self, token: str) -> None:
        await self._redis.client.delete(self._key(token))

    async def is_available(self) -> bool:
        return await self._redis.is_available()
