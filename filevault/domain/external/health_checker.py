from typing import Protocol

from filevault.domain.models.health_status import HealthStatus


class HealthChecker(Protocol):
    """服务健康检查协议"""

    async def check(self) -> HealthStatus:
        """执行健康检查并返回状态"""
        ...
