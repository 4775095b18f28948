from typing import Protocol


class FileStorage(Protocol):
    """文件内容存储协议，原始文件与缩略图都以key寻址"""

    async def put(self, data: bytes) -> str:
        """写入新内容并返回新生成的key"""
        ...

    async def put_at(self, key: str, data: bytes) -> None:
        """在指定的派生key上写入内容(覆盖已有内容)"""
        ...

    async def get(self, key: str) -> bytes:
        """根据key读取内容，不存在时抛出NotFoundError"""
        ...

    async def exists(self, key: str) -> bool:
        """检查key是否有对应的内容"""
        ...

    async def delete(self, key: str) -> None:
        """删除key对应的内容，不存在时忽略"""
        ...

    def variant_key(self, key: str, size: int) -> str:
        """计算指定尺寸缩略图的派生key"""
        ...
