import uuid
from datetime import datetime

from pydantic import BaseModel, Field


def generate_folder_id() -> str:
    """生成文件夹id"""
    return f"folder_{uuid.uuid4().hex}"


class Folder(BaseModel):
    """文件夹Domain模型"""

    id: str = Field(default_factory=generate_folder_id)  # 文件夹id
    name: str = ""  # 文件夹名字
    user_id: str = ""  # 文件夹所属用户ID
    created_at: datetime = Field(default_factory=datetime.now)  # 创建时间
    files_count: int = 0  # 文件数量，每次查询时实时统计，不落库
