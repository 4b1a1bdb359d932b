from datetime import datetime
from typing import Optional

from sqlalchemy import (
    BigInteger,
    DateTime,
    ForeignKey,
    PrimaryKeyConstraint,
    String,
    text,
)
from sqlalchemy.orm import Mapped, mapped_column

from ...domain.models.file import File, generate_file_id
from .base import Base


class FileModel(Base):
    """文件数据ORM模型"""

    __tablename__ = "files"
    __table_args__ = (PrimaryKeyConstraint("id", name="pk_files_id"),)

    id: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        primary_key=True,
        default=generate_file_id,
    )  # 文件id
    name: Mapped[str] = mapped_column(String(255), nullable=False)  # 文件名字
    type: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        server_default=text("'application/octet-stream'"),
    )  # 文件mime-type类型
    size: Mapped[int] = mapped_column(
        BigInteger,
        nullable=False,
        server_default=text("0"),
    )  # 文件大小
    path: Mapped[str] = mapped_column(String(512), nullable=False)  # 存储文件名
    folder_id: Mapped[Optional[str]] = mapped_column(
        String(255),
        ForeignKey("folders.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )  # 所属文件夹ID
    user_id: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        index=True,
    )  # 文件所属用户ID
    upload_date: Mapped[datetime] = mapped_column(
        DateTime,
        nullable=False,
        server_default=text("CURRENT_TIMESTAMP"),
    )  # 上传时间
    last_modified: Mapped[datetime] = mapped_column(
        DateTime,
        nullable=False,
        server_default=text("CURRENT_TIMESTAMP"),
    )  # 最后修改时间

    @classmethod
    def from_domain(cls, file: File) -> "FileModel":
        """从领域模型创建ORM模型"""
        data = file.model_dump(exclude={"mime_type"})
        return cls(type=file.mime_type, **data)

    def to_domain(self) -> File:
        """将ORM模型转换为领域模型"""
        return File(
            id=self.id,
            name=self.name,
            mime_type=self.type,
            size=self.size,
            path=self.path,
            user_id=self.user_id,
            folder_id=self.folder_id,
            upload_date=self.upload_date,
            last_modified=self.last_modified,
        )

    def update_from_domain(self, file: File) -> None:
        """从领域模型更新数据"""
        file_data = file.model_dump(exclude={"id", "mime_type"})
        for field, value in file_data.items():
            setattr(self, field, value)
        self.type = file.mime_type
