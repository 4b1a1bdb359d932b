from typing import Literal

from pydantic import BaseModel


class HealthStatus(BaseModel):
    """服务健康状态"""

    service: str = ""  # 服务名称
    status: Literal["ok", "error"] = "ok"
    details: str = ""  # 异常详情
