"""依赖模块"""

from .auth import CurrentIdentity, get_current_identity, get_identity_validator

__all__ = [
    "CurrentIdentity",
    "get_current_identity",
    "get_identity_validator",
]
