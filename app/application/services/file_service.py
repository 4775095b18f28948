import base64
import binascii
import logging
import mimetypes
from typing import Any, Callable, List, Optional, Tuple

from app.application.errors.exceptions import (
    InvalidOperationError,
    NotFoundError,
    ValidationError,
)
from app.application.services.auth_service import authorize_view
from app.application.services.thumbnail_service import ThumbnailService
from app.application.services.timeouts import with_store_timeout
from app.domain.external.file_storage import FileStorage
from app.domain.models.file import (
    MAX_NAME_LENGTH,
    ROOT_PARENT_ID,
    THUMBNAIL_WIDTHS,
    File,
    FileType,
    is_root_parent,
    parse_file_id,
)
from app.domain.models.user import User
from app.domain.repositories.uow import IUnitOfWork

logger = logging.getLogger(__name__)

DEFAULT_MIME_TYPE = "application/octet-stream"


def _normalize_page(page: Any) -> int:
    """页码非数字或为负数时按第0页处理"""
    try:
        value = int(page)
    except (TypeError, ValueError):
        return 0
    return value if value > 0 else 0


def _decode_data(data: str) -> bytes:
    try:
        # 允许base64内容中带有换行
        return base64.b64decode("".join(data.split()), validate=True)
    except (binascii.Error, ValueError, TypeError, AttributeError):
        raise ValidationError("Invalid data")


class FileService:
    """文件树服务：上传、查询、分页列表、公开状态切换与内容读取"""

    PAGE_SIZE = 20

    def __init__(
        self,
        uow_factory: Callable[[], IUnitOfWork],
        file_storage: FileStorage,
        thumbnail_service: ThumbnailService,
        store_timeout_seconds: float = 10.0,
    ) -> None:
        """构造函数，完成文件服务的初始化"""
        self._uow_factory = uow_factory
        self._file_storage = file_storage
        self._thumbnail_service = thumbnail_service
        self._store_timeout_seconds = store_timeout_seconds

    async def _bounded(self, awaitable, operation: str):
        return await with_store_timeout(
            awaitable, self._store_timeout_seconds, operation
        )

    async def _resolve_parent(self, parent_id: Any) -> str:
        """校验父级目录，返回存储层使用的父级id"""
        if is_root_parent(parent_id):
            return ROOT_PARENT_ID

        parsed = parse_file_id(parent_id)
        if parsed is None:
            raise ValidationError("Parent not found")

        # 父级目录查询不限定所有者
        async with self._uow_factory() as uow:
            parent = await uow.file.get_by_id(parsed)
        if parent is None:
            raise ValidationError("Parent not found")
        if not parent.is_folder:
            raise ValidationError("Parent is not a folder")
        return parsed

    async def _insert(self, file: File) -> File:
        async with self._uow_factory() as uow:
            return await uow.file.create(file)

    async def _discard_content(self, key: str) -> None:
        """元数据写入失败时清理刚写入的内容"""
        try:
            await self._bounded(self._file_storage.delete(key), "content.delete")
        except Exception as e:
            logger.warning(f"清理孤立文件内容[{key}]失败: {str(e)}")

    async def create_file(
        self,
        caller: User,
        name: Optional[str],
        type: Optional[str],
        parent_id: Any = None,
        is_public: bool = False,
        data: Optional[str] = None,
    ) -> File:
        """上传文件或创建文件夹

        非文件夹类型先写入文件内容再写入元数据，内容写入失败时不会产生元数据记录。
        图片上传成功后投递一个缩略图任务，投递失败只记录日志。
        """
        # 1.校验请求参数
        if not name or not isinstance(name, str):
            raise ValidationError("Missing name")
        if len(name) > MAX_NAME_LENGTH:
            raise ValidationError("Name too long")
        try:
            file_type = FileType(type)
        except ValueError:
            raise ValidationError("Missing type")
        if file_type != FileType.FOLDER and not data:
            raise ValidationError("Missing data")
        content = _decode_data(data) if file_type != FileType.FOLDER else None

        # 2.校验父级目录
        parent = await self._bounded(self._resolve_parent(parent_id), "file.parent")

        # 3.文件夹只写入元数据
        if file_type == FileType.FOLDER:
            folder = File(
                user_id=caller.id,
                name=name,
                type=file_type,
                is_public=bool(is_public),
                parent_id=parent,
            )
            return await self._bounded(self._insert(folder), "file.create")

        # 4.先写入文件内容，再写入元数据
        key = await self._bounded(self._file_storage.put(content), "content.put")
        file = File(
            user_id=caller.id,
            name=name,
            type=file_type,
            is_public=bool(is_public),
            parent_id=parent,
            local_path=key,
        )
        try:
            created = await self._bounded(self._insert(file), "file.create")
        except Exception:
            await self._discard_content(key)
            raise

        # 5.图片投递缩略图任务
        if created.type == FileType.IMAGE:
            try:
                await self._bounded(
                    self._thumbnail_service.enqueue(created), "thumbnail.enqueue"
                )
            except Exception as e:
                logger.error(f"投递图片[{created.id}]的缩略图任务失败: {str(e)}")

        return created

    async def get_by_id(self, caller: User, file_id: Any) -> File:
        """获取调用方自己的文件，不存在或不属于调用方时统一抛出NotFound"""
        parsed = parse_file_id(file_id)
        if parsed is None:
            raise NotFoundError()

        async def _get() -> Optional[File]:
            async with self._uow_factory() as uow:
                return await uow.file.get_by_id_and_owner(parsed, caller.id)

        file = await self._bounded(_get(), "file.get")
        if file is None:
            raise NotFoundError()
        return file

    async def list_files(
        self, caller: User, parent_id: Any = None, page: Any = 0
    ) -> List[File]:
        """按插入顺序分页列出调用方在指定目录下的文件，parentId不合法时返回空列表"""
        if is_root_parent(parent_id):
            parent = ROOT_PARENT_ID
        else:
            parent = parse_file_id(parent_id)
            if parent is None:
                return []

        skip = _normalize_page(page) * self.PAGE_SIZE

        async def _list() -> List[File]:
            async with self._uow_factory() as uow:
                return await uow.file.list_by_parent(
                    caller.id, parent, skip, self.PAGE_SIZE
                )

        return await self._bounded(_list(), "file.list")

    async def set_public(self, caller: User, file_id: Any, is_public: bool) -> File:
        """修改文件公开状态，只有所有者可以操作，重复设置同一个值不会报错"""
        parsed = parse_file_id(file_id)
        if parsed is None:
            raise NotFoundError()

        async def _update() -> Optional[File]:
            async with self._uow_factory() as uow:
                return await uow.file.set_public(parsed, caller.id, is_public)

        file = await self._bounded(_update(), "file.set_public")
        if file is None:
            raise NotFoundError()
        return file

    async def get_file_content(
        self, caller: Optional[User], file_id: Any, size: Any = None
    ) -> Tuple[bytes, str]:
        """读取文件内容(或指定宽度的缩略图)，返回内容与MIME类型"""
        # 1.查询文件并校验查看权限，无权限与不存在同样返回NotFound
        parsed = parse_file_id(file_id)
        if parsed is None:
            raise NotFoundError()

        async def _get() -> Optional[File]:
            async with self._uow_factory() as uow:
                return await uow.file.get_by_id(parsed)

        file = await self._bounded(_get(), "file.get")
        if file is None or not authorize_view(caller, file):
            raise NotFoundError()
        if file.is_folder:
            raise InvalidOperationError("A folder doesn't have content")

        # 2.计算内容key，只有合法的缩略图宽度才读取缩略图
        key = file.local_path
        if size is not None and str(size) in {str(w) for w in THUMBNAIL_WIDTHS}:
            key = self._file_storage.variant_key(key, int(size))

        # 3.读取内容，缩略图尚未生成时同样返回NotFound
        content = await self._bounded(self._file_storage.get(key), "content.get")
        mime_type, _ = mimetypes.guess_type(file.name)
        return content, mime_type or DEFAULT_MIME_TYPE
