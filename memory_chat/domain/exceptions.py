"""统一业务异常模型。

所有跨模块抛出的业务级错误都应该继承自 BusinessError，
资源层再通过 faults.as_fault 把它们转换为可分类的故障。
"""


class BusinessError(Exception):
    """业务异常基类。

    Attributes:
        code: 机器可读错误码（如 "NETWORK_ERROR"）。
        message: 用户可读错误信息。
        http_status: 映射到 HTTP 时可用的状态码，默认 400；0 表示请求未拿到响应。
        extra: 其他补充字段（例如 app_message、url 等）。
    """

    def __init__(self, code: str, message: str, http_status: int = 400, **extra):
        self.code = code
        self.message = message
        self.http_status = http_status
        self.extra = extra
        super().__init__(message)


class NetworkError(BusinessError):
    """网络层错误，例如连接失败、超时等。始终没有响应状态码。"""

    def __init__(self, code: str = "NETWORK_ERROR", message: str = "", **extra):
        super().__init__(code=code, message=message, http_status=0, **extra)


class ApiError(BusinessError):
    """后端返回非 2xx 响应时抛出。"""


class RateLimitError(ApiError):
    """后端限流（429）。"""


class ValidationError(BusinessError):
    """参数或配置校验失败。"""
