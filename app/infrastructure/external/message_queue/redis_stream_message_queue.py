import logging
from typing import Any, Optional, Tuple

from app.domain.external.message_queue import MessageQueue
from app.infrastructure.storage.redis import RedisClient
from redis.exceptions import ResponseError

logger = logging.getLogger(__name__)


class RedisStreamMessageQueue(MessageQueue):
    """基于RedisStream+消费者组的消息队列，投递语义为至少一次

    消息被读取后进入消费者组的pending列表，只有ack之后才会移除；
    消费者崩溃遗留的pending消息在空闲超过reclaim_idle_ms后会被其他消费者认领。
    每次读取最多阻塞reclaim_idle_ms，队列空闲时遗留消息同样会被及时认领。
    """

    def __init__(
        self,
        redis_client: RedisClient,
        stream_name: str,
        group_name: str,
        reclaim_idle_ms: int = 60_000,
    ) -> None:
        """构造函数，完成Redis-Stream的初始化，涵盖流名字、消费者组和认领阈值"""
        self._redis = redis_client
        self._stream_name = stream_name
        self._group_name = group_name
        self._reclaim_idle_ms = reclaim_idle_ms

    @property
    def stream_name(self) -> str:
        return self._stream_name

    @property
    def dead_letter_stream(self) -> str:
        return f"{self._stream_name}:failed"

    def _bounded_block_ms(self, block_ms: Optional[int]) -> int:
        """读取的阻塞时间不超过认领阈值，空闲时也能定期重新认领遗留消息"""
        if not block_ms or block_ms > self._reclaim_idle_ms:
            return self._reclaim_idle_ms
        return block_ms

    async def ensure_group(self) -> None:
        """创建消费者组(流不存在时一并创建)，组已存在时忽略"""
        try:
            await self._redis.client.xgroup_create(
                self._stream_name, self._group_name, id="0", mkstream=True
            )
            logger.info(
                f"已创建消息队列[{self._stream_name}]的消费者组[{self._group_name}]"
            )
        except ResponseError as e:
            if "BUSYGROUP" not in str(e):
                raise

    async def put(self, message: Any) -> str:
        """往redis-stream中添加一条消息并返回id"""
        logger.debug(f"往消息队列[{self._stream_name}]中添加一条消息: {message}")

        return await self._redis.client.xadd(self._stream_name, {"data": message})

    async def get(
        self, consumer: str, block_ms: Optional[int] = None
    ) -> Tuple[Optional[str], Any]:
        """以消费者身份获取一条消息，优先认领其他消费者遗留的超时消息"""
        # 1.先尝试认领崩溃消费者遗留的pending消息
        message_id, data = await self.reclaim(consumer)
        if message_id is not None:
            return message_id, data

        # 2.读取从未投递过的新消息
        messages = await self._redis.client.xreadgroup(
            self._group_name,
            consumer,
            {self._stream_name: ">"},
            count=1,
            block=self._bounded_block_ms(block_ms),
        )
        if not messages:
            return None, None

        stream_messages = messages[0][1]
        if not stream_messages:
            return None, None

        # 3.提取id和数据
        message_id, message_data = stream_messages[0]
        return message_id, (message_data or {}).get("data")

    async def reclaim(self, consumer: str) -> Tuple[Optional[str], Any]:
        """认领一条空闲超过阈值的pending消息"""
        result = await self._redis.client.xautoclaim(
            self._stream_name,
            self._group_name,
            consumer,
            min_idle_time=self._reclaim_idle_ms,
            start_id="0-0",
            count=1,
        )
        # redis>=7返回[next_id, messages, deleted_ids]，6.2返回[next_id, messages]
        claimed = result[1] if result and len(result) > 1 else []
        for message_id, message_data in claimed:
            # 已被删除的消息认领后内容为空，直接确认掉
            if not message_data:
                await self.ack(message_id)
                continue
            logger.warning(
                f"消费者[{consumer}]认领了消息队列[{self._stream_name}]中超时未确认的消息: {message_id}"
            )
            return message_id, message_data.get("data")
        return None, None

    async def ack(self, message_id: str) -> None:
        """确认消息处理完成"""
        await self._redis.client.xack(self._stream_name, self._group_name, message_id)

    async def fail(self, message_id: str, message: Any, error: str) -> None:
        """将失败消息写入死信流后确认，避免反复投递"""
        await self._redis.client.xadd(
            self.dead_letter_stream,
            {
                "data": message if message is not None else "",
                "error": error,
                "message_id": message_id,
            },
        )
        await self.ack(message_id)
