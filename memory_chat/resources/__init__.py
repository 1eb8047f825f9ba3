"""资源同步层。

该包下的模块负责：
- errors / classifier: 把加载失败归类为可重试 / 不可重试的 ResourceError。
- timers / retry: 可注入的定时器与指数退避重试调度。
- state / resource / binding: 可观察的资源状态、加载驱动与以键派生的资源。
- presentation: 交给展示层的错误状态快照。
"""

from memory_chat.resources.binding import DerivedResourceBinding
from memory_chat.resources.classifier import classify
from memory_chat.resources.errors import DEFAULT_RETRY_CONFIG, ErrorCategory, ResourceError, RetryConfig
from memory_chat.resources.presentation import ErrorView
from memory_chat.resources.resource import Resource
from memory_chat.resources.retry import ResourceErrorHandler, RetryScheduler, RetryState
from memory_chat.resources.state import ResourceState, Signal, Subscription, attach_error_handler
from memory_chat.resources.timers import AsyncioTimerService, TimerService

__all__ = [
    "AsyncioTimerService",
    "DEFAULT_RETRY_CONFIG",
    "DerivedResourceBinding",
    "ErrorCategory",
    "ErrorView",
    "Resource",
    "ResourceError",
    "ResourceErrorHandler",
    "ResourceState",
    "RetryConfig",
    "RetryScheduler",
    "RetryState",
    "Signal",
    "Subscription",
    "TimerService",
    "attach_error_handler",
    "classify",
]
