"""错误状态展示约定。

展示层（外部协作者）只拿到一个 ErrorView 快照：当前错误、重试计数、最大次数、是否正在重试。
重试按钮只有在 can_retry 为真时才可用；不满足条件时触发重试是空操作而不是错误。
"""

from dataclasses import dataclass
from typing import Callable, Optional

from memory_chat.resources.errors import ResourceError


MAX_RETRIES_REACHED_MESSAGE = "Maximum retry attempts reached."


@dataclass(frozen=True)
class ErrorView:
    error: Optional[ResourceError]
    retry_count: int = 0
    max_retries: int = 3
    retrying: bool = False
    title: str = "Error Loading Data"
    show_retry: bool = True

    @classmethod
    def from_handler(cls, handler, *, retrying: bool = False, **kwargs) -> "ErrorView":
        return cls(
            error=handler.error,
            retry_count=handler.retry_count,
            max_retries=handler.max_retries,
            retrying=retrying or handler.retrying,
            **kwargs,
        )

    @property
    def can_retry(self) -> bool:
        return (
            self.error is not None
            and self.error.is_retryable
            and self.retry_count < self.max_retries
            and not self.retrying
        )

    @property
    def exhausted(self) -> bool:
        """可重试的错误已经用完所有尝试次数。"""

        return (
            self.error is not None
            and self.error.is_retryable
            and self.retry_count >= self.max_retries
        )

    @property
    def status_message(self) -> Optional[str]:
        if self.error is None:
            return None
        if self.exhausted:
            return f"{self.error.message} {MAX_RETRIES_REACHED_MESSAGE}"
        return self.error.message

    def trigger_retry(self, on_retry: Callable[[], None]) -> bool:
        """用户点击重试。不可重试时什么也不做，返回 False。"""

        if not self.can_retry:
            return False
        on_retry()
        return True
