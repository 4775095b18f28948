import asyncio
import json
import logging
import os
import socket
from typing import Any, Callable, Dict, List, Optional, Sequence

from app.application.errors.exceptions import NotFoundError, ValidationError
from app.domain.external.file_storage import FileStorage
from app.domain.external.message_queue import MessageQueue
from app.domain.external.thumbnailer import Thumbnailer
from app.domain.models.file import THUMBNAIL_WIDTHS, File, ThumbnailJob, parse_file_id
from app.domain.repositories.uow import IUnitOfWork

logger = logging.getLogger(__name__)


def _load_payload(payload: Any) -> Dict[str, Any]:
    """将队列中的消息解析为字典"""
    if isinstance(payload, dict):
        return payload
    if isinstance(payload, (str, bytes)):
        try:
            data = json.loads(payload)
        except json.JSONDecodeError:
            raise ValidationError("Invalid job payload")
        if isinstance(data, dict):
            return data
    raise ValidationError("Invalid job payload")


class ThumbnailService:
    """缩略图任务的生产与消费

    生产方在图片上传成功后投递{fileId, ownerId}；消费方为每个宽度生成一张缩略图，
    写入`<原始key>_<宽度>`。同一个任务重复处理只会覆盖写入相同的三张缩略图。
    """

    def __init__(
        self,
        uow_factory: Callable[[], IUnitOfWork],
        file_storage: FileStorage,
        thumbnailer: Thumbnailer,
        message_queue: MessageQueue,
        widths: Sequence[int] = THUMBNAIL_WIDTHS,
    ) -> None:
        self._uow_factory = uow_factory
        self._file_storage = file_storage
        self._thumbnailer = thumbnailer
        self._message_queue = message_queue
        self._widths = tuple(widths)

    async def enqueue(self, file: File) -> str:
        """为上传的图片投递一个缩略图任务，返回消息id"""
        job = ThumbnailJob(file_id=file.id, owner_id=file.user_id)
        message_id = await self._message_queue.put(job.to_message())
        logger.info(f"已投递图片[{file.id}]的缩略图任务: {message_id}")
        return message_id

    async def process(self, payload: Any) -> List[str]:
        """处理一个缩略图任务，全部宽度写入成功后返回缩略图key列表"""
        # 1.校验任务内容
        data = _load_payload(payload)
        if not data.get("fileId") and not data.get("file_id"):
            raise ValidationError("Missing fileId")
        if not any(data.get(k) for k in ("ownerId", "userId", "owner_id")):
            raise ValidationError("Missing ownerId")
        job = ThumbnailJob.model_validate(
            {k: str(v) for k, v in data.items() if v is not None}
        )

        # 2.按所有者查询文件，原始内容必须存在
        file_id = parse_file_id(job.file_id)
        if file_id is None:
            raise NotFoundError("File not found")
        async with self._uow_factory() as uow:
            file = await uow.file.get_by_id_and_owner(file_id, job.owner_id)
        if file is None or file.local_path is None:
            raise NotFoundError("File not found")
        try:
            original = await self._file_storage.get(file.local_path)
        except NotFoundError:
            raise NotFoundError("File not found")

        # 3.按固定顺序生成各宽度缩略图，中途失败会保留已生成的缩略图
        keys: List[str] = []
        for width in self._widths:
            thumbnail = await self._thumbnailer.resize(original, width)
            key = self._file_storage.variant_key(file.local_path, width)
            await self._file_storage.put_at(key, thumbnail)
            keys.append(key)

        logger.info(f"图片[{file.id}]缩略图生成完成: {keys}")
        return keys


class ThumbnailWorker:
    """缩略图worker：多个消费协程并发从队列中拉取任务

    每次读取最多阻塞block_ms，超时后重新检查可认领的pending消息；
    单个任务的处理受job_timeout_seconds限制，失败的任务记录日志后进入失败通道，
    队列读写出错只记录日志，不会导致进程退出。
    """

    def __init__(
        self,
        thumbnail_service: ThumbnailService,
        message_queue: MessageQueue,
        concurrency: int = 4,
        job_timeout_seconds: float = 60.0,
        block_ms: int = 5_000,
        consumer_prefix: Optional[str] = None,
        retry_delay_seconds: float = 1.0,
    ) -> None:
        self._thumbnail_service = thumbnail_service
        self._message_queue = message_queue
        self._concurrency = max(1, concurrency)
        self._job_timeout_seconds = job_timeout_seconds
        self._block_ms = block_ms
        self._consumer_prefix = consumer_prefix or f"{socket.gethostname()}-{os.getpid()}"
        self._retry_delay_seconds = retry_delay_seconds
        self._tasks: List[asyncio.Task] = []
        self._stopping = asyncio.Event()

    @property
    def consumer_names(self) -> List[str]:
        return [f"{self._consumer_prefix}-{i}" for i in range(self._concurrency)]

    async def handle(self, message_id: str, payload: Any) -> bool:
        """处理单条消息，成功时确认，失败时写入失败通道，返回是否成功"""
        try:
            await asyncio.wait_for(
                self._thumbnail_service.process(payload),
                timeout=self._job_timeout_seconds,
            )
        except asyncio.CancelledError:
            raise
        except Exception as e:
            if isinstance(e, asyncio.TimeoutError):
                error = f"job timed out after {self._job_timeout_seconds}s"
            else:
                error = str(e) or e.__class__.__name__
            logger.error(f"缩略图任务[{message_id}]处理失败: {error}")
            try:
                await self._message_queue.fail(message_id, payload, error)
            except Exception as fail_error:
                # 未确认的消息会留在pending列表中，稍后被重新认领
                logger.error(f"缩略图任务[{message_id}]写入失败通道出错: {fail_error}")
            return False

        try:
            await self._message_queue.ack(message_id)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            # 缩略图已写入，未确认的消息稍后被重新认领时只会覆盖写入相同内容
            logger.error(f"缩略图任务[{message_id}]确认失败: {str(e)}")
        return True

    async def _consume(self, consumer: str) -> None:
        logger.info(f"缩略图消费者[{consumer}]已启动")
        while not self._stopping.is_set():
            try:
                message_id, payload = await self._message_queue.get(
                    consumer, block_ms=self._block_ms
                )
            except asyncio.CancelledError:
                raise
            except Exception as e:
                logger.error(f"缩略图消费者[{consumer}]读取队列失败: {str(e)}")
                await asyncio.sleep(self._retry_delay_seconds)
                continue

            if message_id is None:
                continue
            try:
                await self.handle(message_id, payload)
            except asyncio.CancelledError:
                raise
            except Exception as e:
                logger.exception(
                    f"缩略图消费者[{consumer}]处理消息[{message_id}]出错: {str(e)}"
                )
        logger.info(f"缩略图消费者[{consumer}]已退出")

    async def run(self) -> None:
        """启动全部消费协程并等待，直到调用stop"""
        self._stopping.clear()
        self._tasks = [
            asyncio.create_task(self._consume(name), name=name)
            for name in self.consumer_names
        ]
        try:
            await asyncio.gather(*self._tasks)
        except asyncio.CancelledError:
            if not self._stopping.is_set():
                raise
        finally:
            self._tasks = []

    async def stop(self) -> None:
        """停止所有消费协程，阻塞中的读取会被取消"""
        self._stopping.set()
        for task in self._tasks:
            task.cancel()
