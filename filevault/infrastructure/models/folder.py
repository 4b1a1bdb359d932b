from datetime import datetime

from sqlalchemy import DateTime, PrimaryKeyConstraint, String, text
from sqlalchemy.orm import Mapped, mapped_column

from ...domain.models.folder import Folder, generate_folder_id
from .base import Base


class FolderModel(Base):
    """文件夹数据ORM模型"""

    __tablename__ = "folders"
    __table_args__ = (PrimaryKeyConstraint("id", name="pk_folders_id"),)

    id: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        primary_key=True,
        default=generate_folder_id,
    )  # 文件夹id
    name: Mapped[str] = mapped_column(String(255), nullable=False)  # 文件夹名字
    user_id: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        index=True,
    )  # 所属用户ID(鉴权服务中的用户，不做外键约束)
    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        nullable=False,
        server_default=text("CURRENT_TIMESTAMP"),
    )  # 创建时间

    @classmethod
    def from_domain(cls, folder: Folder) -> "FolderModel":
        """从领域模型创建ORM模型"""
        return cls(**folder.model_dump(exclude={"files_count"}))

    def to_domain(self, files_count: int = 0) -> Folder:
        """将ORM模型转换为领域模型"""
        folder = Folder.model_validate(self, from_attributes=True)
        folder.files_count = files_count
        return folder

    def update_from_domain(self, folder: Folder) -> None:
        """从领域模型更新数据"""
        folder_data = folder.model_dump(exclude={"id", "files_count"})
        for field, value in folder_data.items():
            setattr(self, field, value)
