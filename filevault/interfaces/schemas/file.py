from datetime import datetime
from typing import Optional

from filevault.domain.models.file import File, FileStats
from pydantic import BaseModel

from .base import CamelModel


class FileItem(CamelModel):
    """文件信息响应结构"""

    id: str
    name: str
    type: str
    size: int
    url: str  # 静态文件访问地址
    upload_date: datetime
    last_modified: datetime
    user_id: str
    folder_id: Optional[str] = None

    @classmethod
    def from_domain(cls, file: File, url: str) -> "FileItem":
        """根据领域模型和访问地址构建响应结构"""
        return cls(
            id=file.id,
            name=file.name,
            type=file.mime_type,
            size=file.size,
            url=url,
            upload_date=file.upload_date,
            last_modified=file.last_modified,
            user_id=file.user_id,
            folder_id=file.folder_id,
        )


class RenameFileRequest(BaseModel):
    """重命名文件请求结构"""

    name: Optional[str] = None


class FileStatsResponse(CamelModel):
    """文件统计响应结构"""

    total_files: int = 0
    total_size: int = 0
    recent_files: int = 0

    @classmethod
    def from_domain(cls, stats: FileStats) -> "FileStatsResponse":
        return cls(**stats.model_dump())
