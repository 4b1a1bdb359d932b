from datetime import datetime
from typing import Dict, List, Optional, Protocol, Set

from filevault.domain.models.file import File, FileStats


class FileRepository(Protocol):
    """文件模型数据仓库，所有查询均按所属用户进行限定"""

    async def save(self, file: File) -> None:
        """新增或更新文件信息"""
        ...

    async def get_by_id(self, file_id: str, user_id: str) -> Optional[File]:
        """根据文件id和所属用户获取文件信息"""
        ...

    async def list_by_user(
        self, user_id: str, folder_id: Optional[str] = None
    ) -> List[File]:
        """获取用户的文件列表，按上传时间倒序"""
        ...

    async def list_by_folder(self, folder_id: str, user_id: str) -> List[File]:
        """获取文件夹下属于该用户的所有文件"""
        ...

    async def update_name(
        self, file_id: str, user_id: str, name: str, last_modified: datetime
    ) -> bool:
        """更新文件名和最后修改时间，返回是否命中记录"""
        ...

    async def delete(self, file_id: str, user_id: str) -> None:
        """根据文件id删除文件记录"""
        ...

    async def delete_by_folder(self, folder_id: str, user_id: str) -> int:
        """删除文件夹下属于该用户的所有文件记录，返回删除数量"""
        ...

    async def count_by_folder(self, user_id: str) -> Dict[str, int]:
        """统计用户每个文件夹下的文件数量"""
        ...

    async def get_stats(self, user_id: str, recent_since: datetime) -> FileStats:
        """统计用户的文件总数、总大小以及近期上传数量"""
        ...

    async def get_all_paths(self) -> Set[str]:
        """获取所有文件记录引用的存储文件名(一致性巡检使用)"""
        ...
