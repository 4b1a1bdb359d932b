from typing import Optional, Protocol

from filevault.domain.models.identity import Credential, Identity


class IdentityServiceError(Exception):
    """鉴权服务调用失败(网络异常、响应无法解析等)"""


class IdentityValidator(Protocol):
    """身份校验协议，由外部鉴权服务实现"""

    async def validate(self, credential: Credential) -> Optional[Identity]:
        """校验凭证，通过时返回调用方身份，拒绝时返回None

        Raises:
            IdentityServiceError: 鉴权服务不可用
        """
        ...
