"""重试配置与资源错误模型。"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from memory_chat.domain.exceptions import ValidationError
from memory_chat.domain.faults import Fault


@dataclass(frozen=True)
class RetryConfig:
    """资源重试配置，构造后不可变。

    - max_retries: 最大重试次数（>= 0）。
    - initial_delay: 首次重试前的等待（毫秒，> 0）。
    - backoff_multiplier: 指数退避倍数（>= 1）。
    - max_delay: 任意一次等待的上限（毫秒，>= initial_delay）。
    """

    max_retries: int = 3
    initial_delay: float = 1000
    backoff_multiplier: float = 2
    max_delay: float = 10000

    def __post_init__(self) -> None:
        if self.max_retries < 0:
            raise ValidationError(code="INVALID_RETRY_CONFIG", message="max_retries must be >= 0")
        if self.initial_delay <= 0:
            raise ValidationError(code="INVALID_RETRY_CONFIG", message="initial_delay must be > 0")
        if self.backoff_multiplier < 1:
            raise ValidationError(code="INVALID_RETRY_CONFIG", message="backoff_multiplier must be >= 1")
        if self.max_delay < self.initial_delay:
            raise ValidationError(code="INVALID_RETRY_CONFIG", message="max_delay must be >= initial_delay")

    @classmethod
    def from_settings(cls, cfg) -> "RetryConfig":
        return cls(
            max_retries=cfg.retry_max_retries,
            initial_delay=cfg.retry_initial_delay_ms,
            backoff_multiplier=cfg.retry_backoff_multiplier,
            max_delay=cfg.retry_max_delay_ms,
        )


DEFAULT_RETRY_CONFIG = RetryConfig()


class ErrorCategory(str, Enum):
    """加载失败的分类。"""

    NETWORK = "network"
    SERVER_ERROR = "server_error"
    NOT_FOUND = "not_found"
    UNAUTHORIZED = "unauthorized"
    FORBIDDEN = "forbidden"
    CLIENT_ERROR_OTHER = "client_error_other"
    GENERIC = "generic"

    @property
    def is_retryable(self) -> bool:
        return self in _RETRYABLE


_RETRYABLE = frozenset({ErrorCategory.NETWORK, ErrorCategory.SERVER_ERROR, ErrorCategory.GENERIC})


@dataclass(frozen=True)
class ResourceError:
    """一次加载失败的结构化描述。

    新的失败会整体替换旧的 ResourceError，而不是修改它。

    Attributes:
        cause: 原始故障（TransportFault / GenericFault）。
        message: 面向用户的提示。
        retry_count: 分类时的重试计数。
        timestamp: 分类时间（UTC）。
        is_retryable: 是否允许重试。
        category: 故障分类。
    """

    cause: Fault
    message: str
    retry_count: int
    timestamp: datetime
    is_retryable: bool
    category: ErrorCategory
