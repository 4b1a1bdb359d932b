from datetime import datetime
from typing import Optional

from filevault.domain.models.folder import Folder
from pydantic import BaseModel

from .base import CamelModel


class FolderItem(CamelModel):
    """文件夹信息响应结构"""

    id: str
    name: str
    user_id: str
    created_at: datetime
    files_count: int = 0

    @classmethod
    def from_domain(cls, folder: Folder) -> "FolderItem":
        return cls(**folder.model_dump())


class FolderRequest(BaseModel):
    """创建/重命名文件夹请求结构"""

    name: Optional[str] = None
