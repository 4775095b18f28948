import logging
from typing import List, Optional

from app.application.services.file_service import FileService
from app.interfaces.dependencies import CurrentUser, OptionalUser
from app.interfaces.schemas.file import CreateFileRequest, FileView
from app.interfaces.service_dependencies import get_file_service
from fastapi import APIRouter, Depends, Query, Response, status

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/files", tags=["文件模块"])


@router.post(
    path="",
    response_model=FileView,
    status_code=status.HTTP_201_CREATED,
    summary="上传文件/创建文件夹",
    description="data为base64编码的文件内容，文件夹不需要data",
)
async def upload_file(
    request: CreateFileRequest,
    current_user: CurrentUser,
    file_service: FileService = Depends(get_file_service),
) -> FileView:
    file = await file_service.create_file(
        caller=current_user,
        name=request.name,
        type=request.type,
        parent_id=request.parent_id,
        is_public=request.is_public,
        data=request.data,
    )
    return FileView.from_domain(file)


@router.get(
    path="",
    response_model=List[FileView],
    summary="分页获取文件列表",
    description="每页20条，按创建顺序排列；parentId不合法时返回空列表",
)
async def list_files(
    current_user: CurrentUser,
    parent_id: Optional[str] = Query(default=None, alias="parentId"),
    page: Optional[str] = None,
    file_service: FileService = Depends(get_file_service),
) -> List[FileView]:
    files = await file_service.list_files(current_user, parent_id=parent_id, page=page)
    return [FileView.from_domain(file) for file in files]


@router.get(
    path="/{file_id}",
    response_model=FileView,
    summary="获取文件信息",
    description="只有文件所有者可以查看",
)
async def get_file(
    file_id: str,
    current_user: CurrentUser,
    file_service: FileService = Depends(get_file_service),
) -> FileView:
    file = await file_service.get_by_id(current_user, file_id)
    return FileView.from_domain(file)


@router.put(path="/{file_id}/publish", response_model=FileView, summary="公开文件")
async def publish_file(
    file_id: str,
    current_user: CurrentUser,
    file_service: FileService = Depends(get_file_service),
) -> FileView:
    file = await file_service.set_public(current_user, file_id, True)
    return FileView.from_domain(file)


@router.put(path="/{file_id}/unpublish", response_model=FileView, summary="取消公开文件")
async def unpublish_file(
    file_id: str,
    current_user: CurrentUser,
    file_service: FileService = Depends(get_file_service),
) -> FileView:
    file = await file_service.set_public(current_user, file_id, False)
    return FileView.from_domain(file)


@router.get(
    path="/{file_id}/data",
    summary="读取文件内容",
    description="公开文件任何人可读，私有文件只有所有者可读；size为100/250/500时返回缩略图",
)
async def get_file_data(
    file_id: str,
    current_user: OptionalUser,
    size: Optional[str] = None,
    file_service: FileService = Depends(get_file_service),
) -> Response:
    content, mime_type = await file_service.get_file_content(
        current_user, file_id, size
    )
    return Response(content=content, media_type=mime_type)
