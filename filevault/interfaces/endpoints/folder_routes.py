import logging
from typing import List

from filevault.application.services.folder_service import FolderService
from filevault.interfaces.dependencies import CurrentIdentity
from filevault.interfaces.schemas import FolderItem, FolderRequest, MessageResponse
from filevault.interfaces.service_dependencies import get_folder_service
from fastapi import APIRouter, Depends

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/folders", tags=["文件夹模块"])


@router.get(
    path="",
    response_model=List[FolderItem],
    summary="获取文件夹列表",
    description="获取当前用户的所有文件夹，并附带每个文件夹下的文件数量",
)
async def list_folders(
    identity: CurrentIdentity,
    folder_service: FolderService = Depends(get_folder_service),
) -> List[FolderItem]:
    folders = await folder_service.list_folders(identity.user_id)
    return [FolderItem.from_domain(folder) for folder in folders]


@router.post(
    path="",
    response_model=FolderItem,
    status_code=201,
    summary="创建文件夹",
)
async def create_folder(
    body: FolderRequest,
    identity: CurrentIdentity,
    folder_service: FolderService = Depends(get_folder_service),
) -> FolderItem:
    folder = await folder_service.create_folder(identity.user_id, body.name)
    return FolderItem.from_domain(folder)


@router.put(
    path="/{folder_id}",
    response_model=FolderItem,
    summary="重命名文件夹",
)
async def rename_folder(
    folder_id: str,
    body: FolderRequest,
    identity: CurrentIdentity,
    folder_service: FolderService = Depends(get_folder_service),
) -> FolderItem:
    folder = await folder_service.rename_folder(identity.user_id, folder_id, body.name)
    return FolderItem.from_domain(folder)


@router.delete(
    path="/{folder_id}",
    response_model=MessageResponse,
    summary="删除文件夹",
    description="删除文件夹以及文件夹下的所有文件",
)
async def delete_folder(
    folder_id: str,
    identity: CurrentIdentity,
    folder_service: FolderService = Depends(get_folder_service),
) -> MessageResponse:
    await folder_service.delete_folder(identity.user_id, folder_id)
    return MessageResponse(message="Folder deleted successfully")
