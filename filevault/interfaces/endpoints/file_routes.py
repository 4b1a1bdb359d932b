import logging
from typing import List, Optional, Union
from urllib.parse import quote

from filevault.application.services.file_service import FileService
from filevault.domain.models.file import File as FileInfo
from filevault.interfaces.dependencies import CurrentIdentity
from filevault.interfaces.schemas import (
    FileItem,
    FileStatsResponse,
    MessageResponse,
    RenameFileRequest,
)
from filevault.interfaces.service_dependencies import get_file_service
from fastapi import APIRouter, Depends, File, Form, Query, Request, UploadFile
from starlette.datastructures import UploadFile as StarletteUploadFile
from starlette.responses import FileResponse

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/files", tags=["文件模块"])


def build_file_url(request: Request, file: FileInfo) -> str:
    """根据当前请求的host和存储文件名构建静态访问地址"""
    return str(request.url_for("uploads", path=quote(file.path)))


def to_file_item(request: Request, file: FileInfo) -> FileItem:
    return FileItem.from_domain(file, url=build_file_url(request, file))


@router.get(
    path="",
    response_model=List[FileItem],
    summary="获取文件列表",
    description="获取当前用户的所有文件，按上传时间倒序，可通过folderId过滤",
)
async def list_files(
    request: Request,
    identity: CurrentIdentity,
    folder_id: Optional[str] = Query(None, alias="folderId"),
    file_service: FileService = Depends(get_file_service),
) -> List[FileItem]:
    files = await file_service.list_files(identity.user_id, folder_id=folder_id)
    return [to_file_item(request, file) for file in files]


@router.get(
    path="/stats",
    response_model=FileStatsResponse,
    summary="获取文件统计",
    description="统计当前用户的文件总数、总大小和最近7天上传数量",
)
async def get_file_stats(
    identity: CurrentIdentity,
    file_service: FileService = Depends(get_file_service),
) -> FileStatsResponse:
    stats = await file_service.get_stats(identity.user_id)
    return FileStatsResponse.from_domain(stats)


@router.post(
    path="/upload",
    response_model=FileItem,
    status_code=201,
    summary="文件上传接口",
    description="上传单个文件到本地存储并记录文件信息，可指定所属文件夹",
)
async def upload_file(
    request: Request,
    identity: CurrentIdentity,
    file: Union[UploadFile, str, None] = File(None),
    folder_id: Optional[str] = Form(None, alias="folderId"),
    file_service: FileService = Depends(get_file_service),
) -> FileItem:
    """文件上传接口，传递文件返回文件信息"""
    # file字段以普通表单值提交时按未上传文件处理
    upload = file if isinstance(file, StarletteUploadFile) else None
    fileinfo = await file_service.upload_file(
        user_id=identity.user_id,
        filename=upload.filename if upload else None,
        content_type=upload.content_type if upload else None,
        stream=upload.file if upload else None,
        folder_id=folder_id,
    )
    return to_file_item(request, fileinfo)


@router.get(
    path="/{file_id}",
    response_model=FileItem,
    summary="获取文件信息接口",
    description="获取当前用户指定文件的基础信息",
)
async def get_file(
    file_id: str,
    request: Request,
    identity: CurrentIdentity,
    file_service: FileService = Depends(get_file_service),
) -> FileItem:
    fileinfo = await file_service.get_file(identity.user_id, file_id)
    return to_file_item(request, fileinfo)


@router.get(
    path="/{file_id}/download",
    summary="文件下载接口",
    description="下载当前用户的指定文件",
)
async def download_file(
    file_id: str,
    identity: CurrentIdentity,
    file_service: FileService = Depends(get_file_service),
) -> FileResponse:
    path, fileinfo = await file_service.open_file(identity.user_id, file_id)
    return FileResponse(
        path=path,
        media_type=fileinfo.mime_type,
        filename=fileinfo.name,
    )


@router.put(
    path="/{file_id}",
    response_model=FileItem,
    summary="重命名文件接口",
    description="修改文件名，同时更新最后修改时间",
)
async def rename_file(
    file_id: str,
    body: RenameFileRequest,
    request: Request,
    identity: CurrentIdentity,
    file_service: FileService = Depends(get_file_service),
) -> FileItem:
    fileinfo = await file_service.rename_file(identity.user_id, file_id, body.name)
    return to_file_item(request, fileinfo)


@router.delete(
    path="/{file_id}",
    response_model=MessageResponse,
    summary="删除文件接口",
    description="删除文件记录以及磁盘上的文件内容（只能删除自己的文件）",
)
async def delete_file(
    file_id: str,
    identity: CurrentIdentity,
    file_service: FileService = Depends(get_file_service),
) -> MessageResponse:
    await file_service.delete_file(identity.user_id, file_id)
    return MessageResponse(message="File deleted successfully")
