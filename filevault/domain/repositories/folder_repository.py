from typing import List, Optional, Protocol

from filevault.domain.models.folder import Folder


class FolderRepository(Protocol):
    """文件夹模型数据仓库"""

    async def save(self, folder: Folder) -> None:
        """新增或更新文件夹信息"""
        ...

    async def get_by_id(self, folder_id: str, user_id: str) -> Optional[Folder]:
        """根据文件夹id和所属用户获取文件夹"""
        ...

    async def list_by_user(self, user_id: str) -> List[Folder]:
        """获取用户的所有文件夹，按创建时间倒序"""
        ...

    async def update_name(self, folder_id: str, user_id: str, name: str) -> bool:
        """更新文件夹名字，返回是否命中记录"""
        ...

    async def delete(self, folder_id: str, user_id: str) -> None:
        """删除文件夹记录"""
        ...
