from typing import Any, Optional, Protocol, Tuple


class MessageQueue(Protocol):
    """消息队列协议，投递语义为至少一次"""

    async def put(self, message: Any) -> str:
        """往消息队列中添加一条消息并返回消息id"""
        ...

    async def get(
        self, consumer: str, block_ms: Optional[int] = None
    ) -> Tuple[Optional[str], Any]:
        """以指定消费者身份获取一条消息，最多阻塞block_ms毫秒，超时返回(None, None)"""
        ...

    async def ack(self, message_id: str) -> None:
        """确认消息已处理完成"""
        ...

    async def fail(self, message_id: str, message: Any, error: str) -> None:
        """记录处理失败的消息并确认，避免无限重试"""
        ...
