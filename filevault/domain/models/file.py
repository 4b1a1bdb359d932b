import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


def generate_file_id() -> str:
    """生成文件id，使用uuid4避免同一毫秒内的并发上传冲突"""
    return f"file_{uuid.uuid4().hex}"


class File(BaseModel):
    """文件信息Domain模型，记录用户上传到本地存储的文件元数据"""

    id: str = Field(default_factory=generate_file_id)  # 文件id
    name: str = ""  # 文件名字(用户可修改)
    mime_type: str = "application/octet-stream"  # mime-type类型
    size: int = 0  # 文件大小，单位为字节
    path: str = ""  # 上传目录下的存储文件名
    user_id: str = ""  # 文件所属用户ID(来自鉴权服务)
    folder_id: Optional[str] = None  # 文件所属文件夹ID
    upload_date: datetime = Field(default_factory=datetime.now)  # 上传时间
    last_modified: datetime = Field(default_factory=datetime.now)  # 最后修改时间


class FileStats(BaseModel):
    """用户文件统计信息"""

    total_files: int = 0
    total_size: int = 0
    recent_files: int = 0  # 最近7天上传的文件数
