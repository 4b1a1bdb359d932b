from typing import Any


class AppException(RuntimeError):
    """基础应用异常类，继承RuntimeError"""

    def __init__(
        self,
        status_code: int = 400,
        msg: str = "应用程序异常",
        data: Any = None,
    ):
        """构造函数，完成错误数据初始化"""
        self.status_code = status_code
        self.msg = msg
        self.data = data
        super().__init__(msg)


class BadRequestError(AppException):
    """客户端请求错误异常"""

    def __init__(self, msg: str = "Bad request"):
        super().__init__(status_code=400, msg=msg)


class UnauthorizedError(AppException):
    """未携带认证信息异常"""

    def __init__(self, msg: str = "No token provided"):
        super().__init__(status_code=401, msg=msg)


class ForbiddenError(AppException):
    """凭证无效或权限不足异常"""

    def __init__(self, msg: str = "Invalid access token"):
        super().__init__(status_code=403, msg=msg)


class NotFoundError(AppException):
    """资源未找到异常"""

    def __init__(self, msg: str = "Not found"):
        super().__init__(status_code=404, msg=msg)


class PayloadTooLargeError(AppException):
    """上传内容过大异常"""

    def __init__(self, msg: str = "File too large", limit: int | None = None):
        data = {"limit": limit} if limit is not None else None
        super().__init__(status_code=413, msg=msg, data=data)


class ValidationError(AppException):
    """数据验证错误异常"""

    def __init__(self, msg: str = "Validation failed", data: Any = None):
        super().__init__(status_code=422, msg=msg, data=data)


class ServerRequestsError(AppException):
    """服务器请求错误异常"""

    def __init__(self, msg: str = "Internal server error"):
        super().__init__(status_code=500, msg=msg)
