import asyncio
import io
import logging

from app.application.errors.exceptions import ValidationError
from app.domain.external.thumbnailer import Thumbnailer
from PIL import Image, UnidentifiedImageError

logger = logging.getLogger(__name__)


class PillowThumbnailer(Thumbnailer):
    """基于Pillow的缩略图生成器，图片解码与缩放在线程中执行，不阻塞事件循环"""

    def __init__(self, default_format: str = "PNG") -> None:
        self._default_format = default_format

    def _resize_sync(self, data: bytes, width: int) -> bytes:
        try:
            with Image.open(io.BytesIO(data)) as img:
                img.load()
                image_format = img.format or self._default_format
                # 按目标宽度等比计算高度，至少保留1像素
                height = max(1, round(img.height * width / img.width))
                resized = img.resize((width, height), Image.LANCZOS)
        except (UnidentifiedImageError, OSError) as e:
            raise ValidationError(f"Invalid image: {e}")

        # JPEG不支持透明通道
        if image_format.upper() in ("JPEG", "JPG") and resized.mode not in ("RGB", "L"):
            resized = resized.convert("RGB")

        buffer = io.BytesIO()
        resized.save(buffer, format=image_format)
        return buffer.getvalue()

    async def resize(self, data: bytes, width: int) -> bytes:
        """将图片按宽度等比缩放，返回与原图相同格式的内容"""
        return await asyncio.to_thread(self._resize_sync, data, width)
