from datetime import datetime
from typing import Dict, List, Optional, Set

from filevault.domain.models.file import File, FileStats
from filevault.domain.repositories.file_repository import FileRepository
from filevault.infrastructure.models import FileModel
from sqlalchemy import case, delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession


class DBFileRepository(FileRepository):
    """基于数据库的文件数据仓库"""

    def __init__(self, db_session: AsyncSession) -> None:
        """构造函数，完成数据仓库初始化"""
        self.db_session = db_session

    async def save(self, file: File) -> None:
        """根据传递的文件模型存储or更新数据"""
        # 1.根据id查询记录是否存在
        stmt = select(FileModel).where(FileModel.id == file.id)
        result = await self.db_session.execute(stmt)
        record = result.scalar_one_or_none()

        # 2.判断如果文件不存在则新建文件
        if not record:
            record = FileModel.from_domain(file)
            self.db_session.add(record)
            return

        # 3.文件存在则直接更新文件
        record.update_from_domain(file)

    async def get_by_id(self, file_id: str, user_id: str) -> Optional[File]:
        """根据传递的文件id获取文件信息"""
        stmt = select(FileModel).where(
            FileModel.id == file_id,
            FileModel.user_id == user_id,
        )
        result = await self.db_session.execute(stmt)
        record = result.scalar_one_or_none()
        return record.to_domain() if record is not None else None

    async def list_by_user(
        self, user_id: str, folder_id: Optional[str] = None
    ) -> List[File]:
        """获取用户的文件列表，按上传时间倒序"""
        # 1.构建查询语句，按需追加文件夹过滤
        stmt = select(FileModel).where(FileModel.user_id == user_id)
        if folder_id:
            stmt = stmt.where(FileModel.folder_id == folder_id)
        stmt = stmt.order_by(FileModel.upload_date.desc(), FileModel.id.desc())

        # 2.执行查询并转换为领域模型
        result = await self.db_session.execute(stmt)
        return [record.to_domain() for record in result.scalars().all()]

    async def list_by_folder(self, folder_id: str, user_id: str) -> List[File]:
        """获取文件夹下属于该用户的所有文件"""
        stmt = select(FileModel).where(
            FileModel.folder_id == folder_id,
            FileModel.user_id == user_id,
        )
        result = await self.db_session.execute(stmt)
        return [record.to_domain() for record in result.scalars().all()]

    async def update_name(
        self, file_id: str, user_id: str, name: str, last_modified: datetime
    ) -> bool:
        """更新文件名和最后修改时间"""
        stmt = (
            update(FileModel)
            .where(FileModel.id == file_id, FileModel.user_id == user_id)
            .values(name=name, last_modified=last_modified)
        )
        result = await self.db_session.execute(stmt)
        return result.rowcount > 0

    async def delete(self, file_id: str, user_id: str) -> None:
        """根据传递的文件id删除文件记录"""
        stmt = delete(FileModel).where(
            FileModel.id == file_id,
            FileModel.user_id == user_id,
        )
        await self.db_session.execute(stmt)

    async def delete_by_folder(self, folder_id: str, user_id: str) -> int:
        """删除文件夹下属于该用户的所有文件记录"""
        stmt = delete(FileModel).where(
            FileModel.folder_id == folder_id,
            FileModel.user_id == user_id,
        )
        result = await self.db_session.execute(stmt)
        return result.rowcount

    async def count_by_folder(self, user_id: str) -> Dict[str, int]:
        """按文件夹分组统计用户的文件数量"""
        stmt = (
            select(FileModel.folder_id, func.count(FileModel.id))
            .where(FileModel.user_id == user_id, FileModel.folder_id.is_not(None))
            .group_by(FileModel.folder_id)
        )
        result = await self.db_session.execute(stmt)
        return {folder_id: count for folder_id, count in result.all()}

    async def get_stats(self, user_id: str, recent_since: datetime) -> FileStats:
        """统计用户的文件总数、总大小以及近期上传数量"""
        stmt = select(
            func.count(FileModel.id),
            func.coalesce(func.sum(FileModel.size), 0),
            func.coalesce(
                func.sum(case((FileModel.upload_date >= recent_since, 1), else_=0)),
                0,
            ),
        ).where(FileModel.user_id == user_id)
        result = await self.db_session.execute(stmt)
        total_files, total_size, recent_files = result.one()
        return FileStats(
            total_files=total_files,
            total_size=int(total_size),
            recent_files=int(recent_files),
        )

    async def get_all_paths(self) -> Set[str]:
        """获取所有文件记录引用的存储文件名"""
        result = await self.db_session.execute(select(FileModel.path))
        return set(result.scalars().all())
