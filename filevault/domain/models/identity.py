"""调用方身份领域模型"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, Field


class Credential(BaseModel):
    """请求中携带的原始凭证，原样转发给第三方鉴权服务"""

    authorization: Optional[str] = None  # Authorization请求头
    cookie: Optional[str] = None  # Cookie请求头

    def is_empty(self) -> bool:
        """判断是否未携带任何凭证"""
        return not self.authorization and not self.cookie


class Identity(BaseModel):
    """鉴权服务返回的调用方身份"""

    user_id: str
    data: Dict[str, Any] = Field(default_factory=dict)  # 鉴权服务返回的完整数据
