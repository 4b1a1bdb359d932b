"""认证依赖模块"""

import logging
from typing import Annotated, Optional

from filevault.application.errors.exceptions import (
    ForbiddenError,
    ServerRequestsError,
    UnauthorizedError,
)
from filevault.domain.external.identity_validator import (
    IdentityServiceError,
    IdentityValidator,
)
from filevault.domain.models.identity import Credential, Identity
from fastapi import Depends, Header, Request

logger = logging.getLogger(__name__)


def get_identity_validator(request: Request) -> IdentityValidator:
    """获取应用启动时创建的身份校验器"""
    return request.app.state.identity_validator


async def get_current_identity(
    validator: Annotated[IdentityValidator, Depends(get_identity_validator)],
    authorization: Annotated[Optional[str], Header()] = None,
    cookie: Annotated[Optional[str], Header()] = None,
) -> Identity:
    """获取当前调用方身份

    将 Authorization / Cookie 请求头原样转发给鉴权服务，每个请求都重新校验。

    Raises:
        UnauthorizedError: 401 未携带任何凭证(不会调用鉴权服务)
        ForbiddenError: 403 鉴权服务拒绝凭证
        ServerRequestsError: 500 鉴权服务不可用
    """
    # 1.未携带凭证直接拒绝
    credential = Credential(authorization=authorization, cookie=cookie)
    if credential.is_empty():
        raise UnauthorizedError("No token provided")

    # 2.调用鉴权服务校验凭证
    try:
        identity = await validator.validate(credential)
    except IdentityServiceError as e:
        logger.error(f"鉴权服务调用异常: {str(e)}")
        raise ServerRequestsError("Internal server error")

    # 3.鉴权服务未返回身份视为凭证无效
    if identity is None:
        raise ForbiddenError("Invalid access token")
    return identity


# 类型别名，方便使用
CurrentIdentity = Annotated[Identity, Depends(get_current_identity)]
