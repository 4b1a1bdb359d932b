import logging
import os
import shutil
import time
from datetime import datetime
from functools import partial
from pathlib import Path
from typing import BinaryIO, List, Optional

import anyio
from filevault.domain.external.blob_store import (
    BlobInfo,
    BlobStore,
    BlobTooLargeError,
    StoredBlob,
)

logger = logging.getLogger(__name__)

# 单次读写的块大小
CHUNK_SIZE = 1024 * 1024

# 常见文件系统单个文件名的最大字节数
MAX_NAME_BYTES = 255


def fit_blob_name(prefix: str, filename: str) -> str:
    """拼接存储文件名，超出长度限制时截断主干部分并保留扩展名"""
    name = f"{prefix}{filename}"
    if len(name.encode("utf-8")) <= MAX_NAME_BYTES:
        return name

    stem, ext = os.path.splitext(filename)
    budget = MAX_NAME_BYTES - len(prefix.encode("utf-8"))
    if len(ext.encode("utf-8")) >= budget // 2:
        stem, ext = filename, ""
    # 按字节截断，丢弃被截断的半个多字节字符
    stem_bytes = stem.encode("utf-8")[: budget - len(ext.encode("utf-8"))]
    return f"{prefix}{stem_bytes.decode('utf-8', 'ignore')}{ext}"


class LocalBlobStore(BlobStore):
    """基于本地磁盘目录的文件存储"""

    def __init__(self, root: str | Path) -> None:
        """构造函数，完成存储目录初始化"""
        self.root = Path(root).resolve()

    def init(self) -> None:
        """创建存储目录"""
        self.root.mkdir(parents=True, exist_ok=True)
        logger.info(f"本地文件存储目录: {self.root}")

    async def _run_sync(self, fn, /, *args, **kwargs):
        return await anyio.to_thread.run_sync(partial(fn, *args, **kwargs))

    def path_for(self, name: str) -> Path:
        """获取存储文件路径，拒绝任何跳出存储目录的文件名"""
        if not name or name in (".", "..") or "/" in name or "\\" in name:
            raise ValueError(f"非法的存储文件名: {name!r}")
        return self.root / name

    def _write(self, filename: str, stream: BinaryIO, max_size: Optional[int]) -> StoredBlob:
        # 1.以毫秒时间戳为前缀生成存储文件名，独占创建，重名时时间戳顺延
        timestamp = int(time.time() * 1000)
        while True:
            name = fit_blob_name(f"{timestamp}_", filename)
            path = self.path_for(name)
            try:
                target = open(path, "xb")
                break
            except FileExistsError:
                timestamp += 1

        # 2.分块写入并统计大小，超出限制时删除已写入的部分
        size = 0
        try:
            with target:
                while True:
                    chunk = stream.read(CHUNK_SIZE)
                    if not chunk:
                        break
                    size += len(chunk)
                    if max_size is not None and size > max_size:
                        raise BlobTooLargeError(max_size)
                    target.write(chunk)
        except BaseException:
            path.unlink(missing_ok=True)
            raise

        return StoredBlob(name=name, size=size)

    async def save(
        self, filename: str, stream: BinaryIO, max_size: Optional[int] = None
    ) -> StoredBlob:
        """将文件流写入存储目录"""
        blob = await self._run_sync(self._write, filename, stream, max_size)
        logger.info(f"文件写入成功: {blob.name} ({blob.size} 字节)")
        return blob

    def _delete(self, name: str) -> bool:
        try:
            self.path_for(name).unlink()
        except FileNotFoundError:
            return False
        return True

    async def delete(self, name: str) -> bool:
        """删除存储文件，文件不存在时静默跳过"""
        removed = await self._run_sync(self._delete, name)
        if removed:
            logger.info(f"文件删除成功: {name}")
        else:
            logger.info(f"文件不存在，跳过删除: {name}")
        return removed

    async def exists(self, name: str) -> bool:
        """判断存储文件是否存在"""
        return await self._run_sync(self.path_for(name).is_file)

    def _list(self) -> List[BlobInfo]:
        blobs: List[BlobInfo] = []
        with os.scandir(self.root) as entries:
            for entry in entries:
                if not entry.is_file() or entry.name.startswith("."):
                    continue
                stat = entry.stat()
                blobs.append(
                    BlobInfo(
                        name=entry.name,
                        size=stat.st_size,
                        modified_at=datetime.fromtimestamp(stat.st_mtime),
                    )
                )
        return blobs

    async def list_blobs(self) -> List[BlobInfo]:
        """列出存储目录中的所有文件"""
        return await self._run_sync(self._list)

    def _probe(self) -> None:
        probe = self.root / f".probe-{os.getpid()}"
        probe.write_bytes(b"ok")
        probe.unlink()

    async def check_writable(self) -> None:
        """检查存储目录是否可写"""
        await self._run_sync(self._probe)

    async def free_space(self) -> int:
        """存储目录所在磁盘的剩余空间(字节)"""
        usage = await self._run_sync(shutil.disk_usage, self.root)
        return usage.free

