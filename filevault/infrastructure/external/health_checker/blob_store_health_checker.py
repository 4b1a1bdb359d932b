import logging

from filevault.domain.external.health_checker import HealthChecker
from filevault.domain.models.health_status import HealthStatus
from filevault.infrastructure.external.blob_store.local_blob_store import LocalBlobStore

logger = logging.getLogger(__name__)


class BlobStoreHealthChecker(HealthChecker):
    """本地文件存储健康检查器

    存储目录必须可写，且剩余空间至少能容纳一个最大尺寸的上传文件。
    """

    service_name = "blob_store"

    def __init__(self, blob_store: LocalBlobStore, min_free_bytes: int = 0) -> None:
        self._blob_store = blob_store
        self._min_free_bytes = min_free_bytes

    async def check(self) -> HealthStatus:
        # 1.写入并删除探测文件
        try:
            await self._blob_store.check_writable()
            free = await self._blob_store.free_space()
        except OSError as e:
            logger.error(f"文件存储健康检查失败: {str(e)}")
            return HealthStatus(service=self.service_name, status="error", details=str(e))

        # 2.剩余空间不足以接收一次上传时视为异常
        details = f"free={free} bytes"
        if free < self._min_free_bytes:
            logger.warning(f"文件存储剩余空间不足: {free} < {self._min_free_bytes}")
            return HealthStatus(
                service=self.service_name,
                status="error",
                details=f"{details}, required={self._min_free_bytes} bytes",
            )
        return HealthStatus(service=self.service_name, status="ok", details=details)
