import logging
import os
from datetime import datetime, timedelta
from pathlib import Path
from typing import BinaryIO, Callable, List, Optional, Tuple

from filevault.application.errors.exceptions import (
    BadRequestError,
    NotFoundError,
    PayloadTooLargeError,
    ValidationError,
)
from filevault.domain.external.blob_store import BlobStore, BlobTooLargeError
from filevault.domain.models.file import File, FileStats
from filevault.domain.repositories.uow import IUnitOfWork

logger = logging.getLogger(__name__)

# 统计"近期上传"的时间窗口
RECENT_UPLOAD_WINDOW = timedelta(days=7)

# 文件名最大字节数，与files.name字段长度一致
MAX_FILENAME_BYTES = 255


def normalize_filename(filename: str) -> str:
    """还原上传文件名

    部分客户端会把UTF-8编码的文件名按latin1解码后发送，这里尝试反向还原；
    无法还原时(本身就是正确的非latin1字符)保持原样。最后只保留文件名部分。
    """
    try:
        filename = filename.encode("latin1").decode("utf-8")
    except (UnicodeEncodeError, UnicodeDecodeError):
        pass
    return os.path.basename(filename.replace("\\", "/")).strip()


def check_filename_length(name: str) -> None:
    if len(name.encode("utf-8")) > MAX_FILENAME_BYTES:
        raise ValidationError(f"File name is too long (max {MAX_FILENAME_BYTES} bytes)")


class FileService:
    """文件管理服务，负责协调本地文件存储与数据库中的文件记录"""

    def __init__(
        self,
        uow_factory: Callable[[], IUnitOfWork],
        blob_store: BlobStore,
        max_upload_size: Optional[int] = None,
    ) -> None:
        """构造函数，完成文件服务的初始化"""
        self.blob_store = blob_store
        self._uow_factory = uow_factory
        self._uow = uow_factory()
        self._max_upload_size = max_upload_size

    async def list_files(
        self, user_id: str, folder_id: Optional[str] = None
    ) -> List[File]:
        """获取用户的文件列表，可按文件夹过滤"""
        async with self._uow:
            return await self._uow.file.list_by_user(user_id, folder_id=folder_id)

    async def get_file(self, user_id: str, file_id: str) -> File:
        """根据传递的文件id获取文件信息"""
        async with self._uow:
            file = await self._uow.file.get_by_id(file_id, user_id)
        if not file:
            raise NotFoundError("File not found")
        return file

    async def upload_file(
        self,
        user_id: str,
        filename: Optional[str],
        content_type: Optional[str],
        stream: Optional[BinaryIO],
        folder_id: Optional[str] = None,
    ) -> File:
        """上传文件：先写入文件内容，再写入文件记录，记录写入失败时删除已落盘的文件"""
        # 1.校验上传内容
        if stream is None or not filename:
            raise BadRequestError("No files were uploaded")
        name = normalize_filename(filename)
        if not name:
            raise BadRequestError("No files were uploaded")
        check_filename_length(name)

        # 2.校验目标文件夹属于当前用户
        folder_id = folder_id or None
        if folder_id:
            async with self._uow:
                folder = await self._uow.folder.get_by_id(folder_id, user_id)
            if not folder:
                raise NotFoundError("Folder not found")

        # 3.写入文件内容
        try:
            blob = await self.blob_store.save(
                name, stream, max_size=self._max_upload_size
            )
        except BlobTooLargeError as e:
            raise PayloadTooLargeError(limit=e.limit)

        # 4.写入文件记录，失败时执行补偿删除
        now = datetime.now()
        file = File(
            name=name,
            mime_type=content_type or "application/octet-stream",
            size=blob.size,
            path=blob.name,
            user_id=user_id,
            folder_id=folder_id,
            upload_date=now,
            last_modified=now,
        )
        try:
            async with self._uow:
                await self._uow.file.save(file)
        except Exception:
            logger.warning(f"文件记录写入失败，回收已写入的文件: {blob.name}")
            await self._discard_blob(blob.name)
            raise

        logger.info(f"文件上传成功: {name} (ID: {file.id}, 用户: {user_id})")
        return file

    async def rename_file(self, user_id: str, file_id: str, name: Optional[str]) -> File:
        """重命名文件，仅修改文件名与最后修改时间"""
        name = (name or "").strip()
        if not name:
            raise ValidationError("File name is required")
        check_filename_length(name)

        async with self._uow:
            file = await self._uow.file.get_by_id(file_id, user_id)
            if not file:
                raise NotFoundError("File not found")
            await self._uow.file.update_name(
                file_id, user_id, name=name, last_modified=datetime.now()
            )
            file = await self._uow.file.get_by_id(file_id, user_id)

        logger.info(f"文件重命名成功: {file_id} -> {name}")
        return file

    async def delete_file(self, user_id: str, file_id: str) -> None:
        """删除文件：先删除记录并提交，再删除磁盘文件"""
        # 1.检查文件是否存在并删除记录
        async with self._uow:
            file = await self._uow.file.get_by_id(file_id, user_id)
            if not file:
                raise NotFoundError("File not found")
            await self._uow.file.delete(file_id, user_id)

        # 2.记录删除成功后再删除磁盘文件
        await self._discard_blob(file.path)
        logger.info(f"文件删除成功: {file.name} (ID: {file_id})")

    async def open_file(self, user_id: str, file_id: str) -> Tuple[Path, File]:
        """获取文件在磁盘上的路径，用于下载"""
        file = await self.get_file(user_id, file_id)
        if not await self.blob_store.exists(file.path):
            logger.error(f"文件记录存在但内容缺失: {file.path} (ID: {file_id})")
            raise NotFoundError("File content missing")
        return self.blob_store.path_for(file.path), file

    async def get_stats(self, user_id: str) -> FileStats:
        """获取用户的文件统计信息"""
        async with self._uow:
            return await self._uow.file.get_stats(
                user_id, recent_since=datetime.now() - RECENT_UPLOAD_WINDOW
            )

    async def _discard_blob(self, name: str) -> None:
        """删除磁盘文件，失败时仅记录日志，由一致性巡检负责回收"""
        try:
            await self.blob_store.delete(name)
        except OSError as e:
            logger.error(f"删除磁盘文件[{name}]失败: {str(e)}")
