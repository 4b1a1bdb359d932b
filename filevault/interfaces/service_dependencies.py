import logging
from typing import Callable

from filevault.application.services.file_service import FileService
from filevault.application.services.folder_service import FolderService
from filevault.application.services.status_service import StatusService
from filevault.core.config import Settings
from filevault.domain.repositories.uow import IUnitOfWork
from filevault.infrastructure.external.blob_store.local_blob_store import LocalBlobStore
from filevault.infrastructure.external.health_checker.blob_store_health_checker import (
    BlobStoreHealthChecker,
)
from filevault.infrastructure.external.health_checker.database_health_checker import (
    DatabaseHealthChecker,
)
from filevault.infrastructure.storage.database import get_database, get_db_session
from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

logger = logging.getLogger(__name__)


def get_app_settings(request: Request) -> Settings:
    """获取应用启动时使用的配置"""
    return request.app.state.settings


def get_blob_store(request: Request) -> LocalBlobStore:
    """获取应用启动时创建的本地文件存储"""
    return request.app.state.blob_store


def get_uow_factory(request: Request) -> Callable[[], IUnitOfWork]:
    """获取UoW工厂"""
    return get_database(request).uow


def get_file_service(
    settings: Settings = Depends(get_app_settings),
    uow_factory: Callable[[], IUnitOfWork] = Depends(get_uow_factory),
    blob_store: LocalBlobStore = Depends(get_blob_store),
) -> FileService:
    """获取文件服务"""
    return FileService(
        uow_factory=uow_factory,
        blob_store=blob_store,
        max_upload_size=settings.max_upload_size,
    )


def get_folder_service(
    uow_factory: Callable[[], IUnitOfWork] = Depends(get_uow_factory),
    blob_store: LocalBlobStore = Depends(get_blob_store),
) -> FolderService:
    """获取文件夹服务"""
    return FolderService(uow_factory=uow_factory, blob_store=blob_store)


def get_status_service(
    settings: Settings = Depends(get_app_settings),
    db_session: AsyncSession = Depends(get_db_session),
    blob_store: LocalBlobStore = Depends(get_blob_store),
) -> StatusService:
    """获取状态服务"""
    logger.info("加载获取StatusService")
    return StatusService(
        checkers=[
            DatabaseHealthChecker(db_session),
            BlobStoreHealthChecker(blob_store, min_free_bytes=settings.max_upload_size),
        ]
    )
