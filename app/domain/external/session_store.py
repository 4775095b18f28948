from typing import Optional, Protocol


class SessionStore(Protocol):
    """会话存储协议：token -> 用户id，带过期时间"""

    async def get(self, token: str) -> Optional[str]:
        """根据token获取用户id，不存在或已过期返回None"""
        ...

    async def set(self, token: str, user_id: str, ttl_seconds: int) -> None:
        """写入会话并设置过期时间"""
        ...

    async def delete(self, token: str) -> None:
        """删除会话"""
        ...

    async def is_available(self) -> bool:
        """会话存储是否可用"""
        ...
