import logging

from filevault.domain.external.health_checker import HealthChecker
from filevault.domain.models.health_status import HealthStatus
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

logger = logging.getLogger(__name__)


class DatabaseHealthChecker(HealthChecker):
    """数据库健康检查器"""

    service_name = "database"

    def __init__(self, db_session: AsyncSession) -> None:
        self._db_session = db_session

    async def check(self) -> HealthStatus:
        """执行一段简单的sql，用于判断数据库服务是否正常"""
        try:
            await self._db_session.execute(text("SELECT 1"))
            return HealthStatus(service=self.service_name, status="ok")
        except Exception as e:
            logger.error(f"数据库健康检查失败: {str(e)}")
            return HealthStatus(
                service=self.service_name,
                status="error",
                details=str(e),
            )
