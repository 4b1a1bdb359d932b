from datetime import datetime
from pathlib import Path
from typing import BinaryIO, List, Optional, Protocol

from pydantic import BaseModel


class StoredBlob(BaseModel):
    """落盘后的文件内容信息"""

    name: str  # 存储文件名: <毫秒时间戳>_<原始文件名>
    size: int  # 实际写入的字节数


class BlobInfo(BaseModel):
    """存储目录中的文件条目"""

    name: str
    size: int
    modified_at: datetime


class BlobTooLargeError(Exception):
    """写入内容超过大小限制"""

    def __init__(self, limit: int) -> None:
        self.limit = limit
        super().__init__(f"文件大小超过限制: {limit} 字节")


class BlobStore(Protocol):
    """文件内容存储协议"""

    async def save(
        self, filename: str, stream: BinaryIO, max_size: Optional[int] = None
    ) -> StoredBlob:
        """将文件流写入存储并返回存储信息，超出max_size时抛出BlobTooLargeError"""
        ...

    async def delete(self, name: str) -> bool:
        """删除存储文件，文件不存在时返回False"""
        ...

    async def exists(self, name: str) -> bool:
        """判断存储文件是否存在"""
        ...

    def path_for(self, name: str) -> Path:
        """获取存储文件在磁盘上的路径"""
        ...

    async def list_blobs(self) -> List[BlobInfo]:
        """列出存储目录中的所有文件"""
        ...
