"""统一业务异常模型。

所有跨模块抛出的业务级错误都应该继承自 BusinessError，
便于在 API 层做统一捕获，并映射为 {"error", "message"} 响应体。
"""


class BusinessError(Exception):
    """业务异常基类。

    Attributes:
        code: 机器可读错误码（如 "UPSTREAM_TIMEOUT"）。
        message: 用户可读错误信息。
        http_status: 映射到 HTTP 时可用的状态码，默认 400。
        extra: 其他补充字段（例如 provider、status 等）。
    """

    def __init__(self, code: str, message: str, http_status: int = 400, **extra):
        self.code = code
        self.message = message
        self.http_status = http_status
        self.extra = extra
        super().__init__(message)


class ConfigurationError(BusinessError):
    """已选中的档位缺少必需的密钥/地址。

    正常情况下档位选择已经按配置过滤，这里只是兜底，映射为 500。
    """

    def __init__(self, code: str, message: str, http_status: int = 500, **extra):
        super().__init__(code, message, http_status, **extra)


class UpstreamError(BusinessError):
    """上游 Provider 调用失败：非 2xx、网络错误或超时，映射为 502。

    不会在其他档位上重试。
    """

    def __init__(self, code: str, message: str, http_status: int = 502, **extra):
        super().__init__(code, message, http_status, **extra)


class RateLimitError(BusinessError):
    """请求超过限流窗口配额。"""

    def __init__(self, code: str, message: str, http_status: int = 429, **extra):
        super().__init__(code, message, http_status, **extra)
