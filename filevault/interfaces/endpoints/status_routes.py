import logging
from typing import List

from filevault.application.services.status_service import StatusService
from filevault.domain.models.health_status import HealthStatus
from filevault.interfaces.dependencies import CurrentIdentity
from filevault.interfaces.service_dependencies import get_status_service
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/status", tags=["状态模块"])


@router.get(
    "",
    response_model=List[HealthStatus],
    summary="系统健康检查",
    description="检查数据库、本地文件存储等服务的健康状态",
)
async def get_status(
    identity: CurrentIdentity,
    status_service: StatusService = Depends(get_status_service),
):
    """系统健康检查，存在异常服务时返回503"""
    statuses = await status_service.check_all()

    if any(item.status == "error" for item in statuses):
        return JSONResponse(
            status_code=503,
            content=[item.model_dump() for item in statuses],
        )

    return statuses
