from typing import Protocol


class Thumbnailer(Protocol):
    """图片缩放协议"""

    async def resize(self, data: bytes, width: int) -> bytes:
        """将图片按宽度等比缩放，返回编码后的图片内容"""
        ...
