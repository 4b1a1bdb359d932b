import logging
from datetime import datetime, timedelta
from typing import Callable, List

from filevault.domain.external.blob_store import BlobStore
from filevault.domain.repositories.uow import IUnitOfWork
from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)


class ReconcileReport(BaseModel):
    """磁盘文件与文件记录一致性巡检结果"""

    orphan_blobs: List[str] = Field(default_factory=list)  # 无记录引用的磁盘文件
    removed_blobs: List[str] = Field(default_factory=list)  # 本次已删除的孤儿文件
    missing_blobs: List[str] = Field(default_factory=list)  # 有记录但磁盘文件缺失


class MaintenanceService:
    """存储维护服务，回收上传/删除中断后遗留的不一致数据"""

    def __init__(
        self,
        uow_factory: Callable[[], IUnitOfWork],
        blob_store: BlobStore,
        orphan_grace_seconds: int = 3600,
    ) -> None:
        self.blob_store = blob_store
        self._uow = uow_factory()
        self._orphan_grace = timedelta(seconds=orphan_grace_seconds)

    async def reconcile(self, dry_run: bool = False) -> ReconcileReport:
        """对比磁盘文件和文件记录

        超过宽限期且没有记录引用的磁盘文件会被删除(宽限期内的可能是正在上传的文件)，
        磁盘文件缺失的记录只报告不删除。
        """
        # 1.读取磁盘文件和所有记录引用的文件名
        blobs = await self.blob_store.list_blobs()
        async with self._uow:
            referenced = await self._uow.file.get_all_paths()

        # 2.找出孤儿文件和缺失文件
        report = ReconcileReport()
        blob_names = {blob.name for blob in blobs}
        report.missing_blobs = sorted(referenced - blob_names)

        cutoff = datetime.now() - self._orphan_grace
        for blob in sorted(blobs, key=lambda item: item.name):
            if blob.name in referenced or blob.modified_at > cutoff:
                continue
            report.orphan_blobs.append(blob.name)
            if dry_run:
                continue
            if await self.blob_store.delete(blob.name):
                report.removed_blobs.append(blob.name)

        # 3.输出巡检结果
        for name in report.missing_blobs:
            logger.warning(f"文件记录引用的磁盘文件不存在: {name}")
        logger.info(
            f"一致性巡检完成: 孤儿文件{len(report.orphan_blobs)}个, "
            f"已删除{len(report.removed_blobs)}个, 缺失文件{len(report.missing_blobs)}个"
        )
        return report
