from typing import List, Optional

from filevault.domain.models.folder import Folder
from filevault.domain.repositories.folder_repository import FolderRepository
from filevault.infrastructure.models import FolderModel
from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession


class DBFolderRepository(FolderRepository):
    """基于数据库的文件夹数据仓库"""

    def __init__(self, db_session: AsyncSession) -> None:
        """构造函数，完成数据仓库初始化"""
        self.db_session = db_session

    async def save(self, folder: Folder) -> None:
        """新增或更新文件夹"""
        # 1.根据id查询记录是否存在
        stmt = select(FolderModel).where(FolderModel.id == folder.id)
        result = await self.db_session.execute(stmt)
        record = result.scalar_one_or_none()

        # 2.不存在则新建，存在则更新
        if not record:
            self.db_session.add(FolderModel.from_domain(folder))
            return
        record.update_from_domain(folder)

    async def get_by_id(self, folder_id: str, user_id: str) -> Optional[Folder]:
        """根据文件夹id和所属用户查询文件夹"""
        stmt = select(FolderModel).where(
            FolderModel.id == folder_id,
            FolderModel.user_id == user_id,
        )
        result = await self.db_session.execute(stmt)
        record = result.scalar_one_or_none()
        return record.to_domain() if record is not None else None

    async def list_by_user(self, user_id: str) -> List[Folder]:
        """获取用户的所有文件夹"""
        stmt = (
            select(FolderModel)
            .where(FolderModel.user_id == user_id)
            .order_by(FolderModel.created_at.desc(), FolderModel.id.desc())
        )
        result = await self.db_session.execute(stmt)
        return [record.to_domain() for record in result.scalars().all()]

    async def update_name(self, folder_id: str, user_id: str, name: str) -> bool:
        """更新文件夹名字"""
        stmt = (
            update(FolderModel)
            .where(FolderModel.id == folder_id, FolderModel.user_id == user_id)
            .values(name=name)
        )
        result = await self.db_session.execute(stmt)
        return result.rowcount > 0

    async def delete(self, folder_id: str, user_id: str) -> None:
        """删除文件夹记录"""
        stmt = delete(FolderModel).where(
            FolderModel.id == folder_id,
            FolderModel.user_id == user_id,
        )
        await self.db_session.execute(stmt)
