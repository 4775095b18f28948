import asyncio
import logging
import os
import tempfile
import uuid
from pathlib import Path

from app.application.errors.exceptions import NotFoundError, StorageError
from app.domain.external.file_storage import FileStorage

logger = logging.getLogger(__name__)


class LocalFileStorage(FileStorage):
    """基于本地文件系统的文件内容存储，key为uuid4，缩略图以`<key>_<宽度>`命名"""

    def __init__(self, root: str) -> None:
        """构造函数，完成存储根目录初始化(目录在第一次写入前创建)"""
        self._root = Path(root)

    @property
    def root(self) -> Path:
        return self._root

    def _resolve(self, key: str) -> Path:
        """将key解析为根目录下的绝对路径，越界的key视为不存在"""
        root = self._root.resolve()
        path = (root / key).resolve()
        if not key or path.parent != root:
            raise NotFoundError("Not found")
        return path

    def _write(self, path: Path, data: bytes) -> None:
        # 先写临时文件再原子替换，同一key被重复写入时读取方不会看到半个文件
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=path.parent, prefix=".tmp-")
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(data)
            os.replace(tmp_path, path)
        except OSError:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise

    async def put(self, data: bytes) -> str:
        """写入新内容并返回新生成的key"""
        key = str(uuid.uuid4())
        await self.put_at(key, data)
        return key

    async def put_at(self, key: str, data: bytes) -> None:
        """在指定key上写入内容，已存在时覆盖"""
        path = self._resolve(key)
        try:
            await asyncio.to_thread(self._write, path, data)
        except OSError as e:
            logger.error(f"写入文件内容[{key}]失败: {str(e)}")
            raise StorageError()

    async def get(self, key: str) -> bytes:
        """根据key读取内容"""
        path = self._resolve(key)
        try:
            return await asyncio.to_thread(path.read_bytes)
        except (FileNotFoundError, IsADirectoryError):
            raise NotFoundError("Not found")

    async def exists(self, key: str) -> bool:
        try:
            path = self._resolve(key)
        except NotFoundError:
            return False
        return await asyncio.to_thread(path.is_file)

    async def delete(self, key: str) -> None:
        """删除key对应的内容，不存在时忽略"""
        path = self._resolve(key)
        await asyncio.to_thread(path.unlink, missing_ok=True)

    def variant_key(self, key: str, size: int) -> str:
        return f"{key}_{size}"
