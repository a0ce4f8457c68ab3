"""统一业务异常模型。

所有跨模块抛出的业务级错误都应该继承自 BusinessError，
便于 Controller 在边界处统一捕获，并转换为一条通用的系统提示。
"""

from typing import Optional


class BusinessError(Exception):
    """业务异常基类。

    Attributes:
        code: 机器可读错误码（如 "HTTP_ERROR"）。
        message: 错误信息，仅用于日志，不直接展示给用户。
        http_status: 映射到 HTTP 时可用的状态码，默认 400。
        extra: 其他补充字段（例如 attempt、url 等）。
    """

    def __init__(self, code: str, message: str, http_status: int = 400, **extra):
        self.code = code
        self.message = message
        self.http_status = http_status
        self.extra = extra
        super().__init__(message)


class ValidationError(BusinessError):
    """参数或状态校验失败（例如空消息、未知状态）。"""


class NetworkError(BusinessError):
    """网络层错误基类，Live 模式下所有传输失败都继承自它。"""


class TransportError(NetworkError):
    """非 2xx 响应、连接异常或响应体无法解析，可重试。"""


class RequestTimeoutError(NetworkError):
    """单次请求超过 TIMEOUT_MS 未返回，已被取消，可重试。"""


class ExhaustedRetriesError(NetworkError):
    """重试次数耗尽后的终止错误，由 Controller 转换为系统消息。"""

    def __init__(self, attempts: int, last_error: Optional[NetworkError] = None, **extra):
        super().__init__(
            code="RETRIES_EXHAUSTED",
            message=f"Request failed after {attempts} attempts",
            http_status=last_error.http_status if last_error else 503,
            **extra,
        )
        self.attempts = attempts
        self.last_error = last_error
