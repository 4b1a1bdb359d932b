"""基于第三方HTTP鉴权服务的身份校验"""

import logging
from typing import Dict, Optional

import httpx
from filevault.domain.external.identity_validator import (
    IdentityServiceError,
    IdentityValidator,
)
from filevault.domain.models.identity import Credential, Identity

logger = logging.getLogger(__name__)


class HttpIdentityValidator(IdentityValidator):
    """将请求凭证原样转发给第三方鉴权服务进行校验

    鉴权服务返回 {"data": {...}}，data为真值时视为校验通过，
    用户id取data.userId(兼容data.id)。本地不保存任何会话状态。
    """

    def __init__(
        self,
        api_url: str,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        """构造函数，只保存配置，HTTP客户端在init中创建"""
        self._api_url = api_url
        self._timeout = timeout
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def init(self) -> None:
        """创建HTTP客户端"""
        if self._client is not None:
            logger.warning("鉴权服务客户端已初始化，跳过重复初始化。")
            return
        self._client = httpx.AsyncClient(timeout=self._timeout, transport=self._transport)
        logger.info(f"鉴权服务客户端初始化成功: {self._api_url}")

    async def shutdown(self) -> None:
        """关闭HTTP客户端"""
        if self._client is not None:
            await self._client.aclose()
            logger.info("鉴权服务客户端已关闭.")
        self._client = None

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            raise RuntimeError("鉴权服务客户端未初始化，请先调用init方法进行初始化。")
        return self._client

    @staticmethod
    def _build_headers(credential: Credential) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if credential.authorization:
            headers["Authorization"] = credential.authorization
        if credential.cookie:
            headers["Cookie"] = credential.cookie
        return headers

    async def validate(self, credential: Credential) -> Optional[Identity]:
        """调用鉴权服务校验凭证"""
        # 1.转发凭证请求鉴权服务
        try:
            response = await self.client.get(
                self._api_url, headers=self._build_headers(credential)
            )
            payload = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"调用鉴权服务失败: {str(e)}")
            raise IdentityServiceError(str(e)) from e

        # 2.解析身份数据，data为空视为凭证无效
        data = payload.get("data") if isinstance(payload, dict) else None
        if not data or not isinstance(data, dict):
            logger.info(f"鉴权服务拒绝凭证, 状态码: {response.status_code}")
            return None

        user_id = data.get("userId") or data.get("id")
        if not user_id:
            logger.warning("鉴权服务返回的身份数据缺少用户id")
            return None

        return Identity(user_id=str(user_id), data=data)
