import asyncio
import logging
from typing import List, Sequence

from filevault.domain.external.health_checker import HealthChecker
from filevault.domain.models.health_status import HealthStatus

logger = logging.getLogger(__name__)


class StatusService:
    """依赖服务状态巡检：数据库与本地文件存储"""

    def __init__(self, checkers: Sequence[HealthChecker], timeout: float = 5.0) -> None:
        """构造函数，timeout为单个检查的最长等待时间(秒)"""
        self._checkers = list(checkers)
        self._timeout = timeout

    async def _run(self, checker: HealthChecker) -> HealthStatus:
        service = getattr(checker, "service_name", checker.__class__.__name__)
        try:
            return await asyncio.wait_for(checker.check(), timeout=self._timeout)
        except asyncio.TimeoutError:
            logger.error(f"{service}健康检查超时({self._timeout}s)")
            return HealthStatus(service=service, status="error", details="timeout")
        except Exception as e:
            logger.error(f"{service}健康检查异常: {str(e)}", exc_info=True)
            return HealthStatus(service=service, status="error", details=str(e))

    async def check_all(self) -> List[HealthStatus]:
        """并发执行所有检查，结果顺序与检查器顺序一致"""
        return list(await asyncio.gather(*(self._run(c) for c in self._checkers)))
