import logging
from typing import Callable, List, Optional

from filevault.application.errors.exceptions import NotFoundError, ValidationError
from filevault.domain.external.blob_store import BlobStore
from filevault.domain.models.folder import Folder
from filevault.domain.repositories.uow import IUnitOfWork

logger = logging.getLogger(__name__)


class FolderService:
    """文件夹管理服务"""

    def __init__(
        self,
        uow_factory: Callable[[], IUnitOfWork],
        blob_store: BlobStore,
    ) -> None:
        """构造函数，完成文件夹服务的初始化"""
        self.blob_store = blob_store
        self._uow_factory = uow_factory
        self._uow = uow_factory()

    async def list_folders(self, user_id: str) -> List[Folder]:
        """获取用户的文件夹列表，并实时统计每个文件夹下的文件数量"""
        async with self._uow:
            folders = await self._uow.folder.list_by_user(user_id)
            counts = await self._uow.file.count_by_folder(user_id)

        for folder in folders:
            folder.files_count = counts.get(folder.id, 0)
        return folders

    async def create_folder(self, user_id: str, name: Optional[str]) -> Folder:
        """创建文件夹"""
        name = (name or "").strip()
        if not name:
            raise ValidationError("Folder name is required")

        folder = Folder(name=name, user_id=user_id)
        async with self._uow:
            await self._uow.folder.save(folder)

        logger.info(f"文件夹创建成功: {name} (ID: {folder.id}, 用户: {user_id})")
        return folder

    async def rename_folder(
        self, user_id: str, folder_id: str, name: Optional[str]
    ) -> Folder:
        """重命名文件夹，回读结果同样限定所属用户"""
        name = (name or "").strip()
        if not name:
            raise ValidationError("Folder name is required")

        async with self._uow:
            updated = await self._uow.folder.update_name(folder_id, user_id, name)
            if not updated:
                raise NotFoundError("Folder not found")
            folder = await self._uow.folder.get_by_id(folder_id, user_id)
            counts = await self._uow.file.count_by_folder(user_id)

        folder.files_count = counts.get(folder.id, 0)
        logger.info(f"文件夹重命名成功: {folder_id} -> {name}")
        return folder

    async def delete_folder(self, user_id: str, folder_id: str) -> int:
        """删除文件夹及其下所有文件，返回删除的文件数量

        文件记录与文件夹记录在同一事务中删除，提交成功后再删除磁盘文件，
        磁盘文件删除失败只会留下孤儿文件，由一致性巡检回收。
        """
        # 1.在同一事务中删除文件记录和文件夹记录
        async with self._uow:
            folder = await self._uow.folder.get_by_id(folder_id, user_id)
            if not folder:
                raise NotFoundError("Folder not found")
            files = await self._uow.file.list_by_folder(folder_id, user_id)
            await self._uow.file.delete_by_folder(folder_id, user_id)
            await self._uow.folder.delete(folder_id, user_id)

        # 2.删除磁盘文件，不存在的文件直接跳过
        for file in files:
            try:
                await self.blob_store.delete(file.path)
            except OSError as e:
                logger.error(f"删除磁盘文件[{file.path}]失败: {str(e)}")

        logger.info(f"文件夹删除成功: {folder.name} (ID: {folder_id}, 文件数: {len(files)})")
        return len(files)
