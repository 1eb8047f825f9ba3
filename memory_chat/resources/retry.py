"""重试调度。

- RetryState: 单个资源的重试状态（当前错误、重试计数、挂起的定时器）。
- RetryScheduler: 计算指数退避延迟、限制最大次数，并保证每个资源最多只有一个挂起定时器。
- ResourceErrorHandler: 把 RetryState、RetryConfig、调度器与分类器组合成资源级的错误处理对象。

调度器本身不关心被重试操作的结果：重试后的加载若再次失败，
会沿着资源状态的正常流转重新进入分类。
"""

from dataclasses import dataclass
from typing import Callable, Optional

from memory_chat.domain.faults import Fault
from memory_chat.infrastructure.logging.logger import logger
from memory_chat.resources.classifier import classify
from memory_chat.resources.errors import DEFAULT_RETRY_CONFIG, ResourceError, RetryConfig
from memory_chat.resources.timers import AsyncioTimerService, TimerHandle, TimerService


@dataclass
class RetryState:
    """单个资源的重试状态。

    retry_count 在两次 reset 之间只增不减；pending_timer 任意时刻最多一个。
    """

    error: Optional[ResourceError] = None
    retry_count: int = 0
    pending_timer: Optional[TimerHandle] = None


class RetryScheduler:
    def __init__(self, timer: Optional[TimerService] = None):
        self._timer = timer or AsyncioTimerService()

    @staticmethod
    def can_retry(state: RetryState, config: RetryConfig) -> bool:
        return (
            state.error is not None
            and state.error.is_retryable
            and state.retry_count < config.max_retries
        )

    @staticmethod
    def compute_delay(state: RetryState, config: RetryConfig) -> float:
        delay = config.initial_delay * config.backoff_multiplier ** state.retry_count
        return min(delay, config.max_delay)

    def schedule_retry(
        self,
        state: RetryState,
        config: RetryConfig,
        operation: Callable[[], None],
    ) -> Optional[float]:
        """调度一次重试，返回本次延迟（毫秒）；不满足条件时返回 None。"""

        if not self.can_retry(state, config):
            return None
        delay = self.compute_delay(state, config)
        # 计数代表“已请求的重试次数”，在等待开始前递增
        state.retry_count += 1
        self.cancel_pending(state)

        def _fire() -> None:
            state.pending_timer = None
            operation()

        state.pending_timer = self._timer.schedule(delay, _fire)
        return delay

    @staticmethod
    def cancel_pending(state: RetryState) -> None:
        if state.pending_timer is not None:
            state.pending_timer.cancel()
            state.pending_timer = None

    def reset(self, state: RetryState) -> None:
        """取消挂起的定时器并清空错误与计数，可重复调用。"""

        self.cancel_pending(state)
        state.error = None
        state.retry_count = 0


class ResourceErrorHandler:
    """资源级错误处理。

    - handle_error: 分类故障并替换当前错误。
    - retry: 按退避策略调度一次 operation。
    - reset: 资源加载成功或显式刷新时清空状态。

    展示层只读取 error / retry_count / max_retries / retrying，不直接修改计数。
    """

    def __init__(
        self,
        config: RetryConfig = DEFAULT_RETRY_CONFIG,
        *,
        scheduler: Optional[RetryScheduler] = None,
        timer: Optional[TimerService] = None,
        name: str = "resource",
    ):
        self.config = config
        self.name = name
        self._scheduler = scheduler or RetryScheduler(timer)
        self._state = RetryState()

    @property
    def state(self) -> RetryState:
        return self._state

    @property
    def error(self) -> Optional[ResourceError]:
        return self._state.error

    @property
    def retry_count(self) -> int:
        return self._state.retry_count

    @property
    def max_retries(self) -> int:
        return self.config.max_retries

    @property
    def can_retry(self) -> bool:
        return self._scheduler.can_retry(self._state, self.config)

    @property
    def retrying(self) -> bool:
        """是否有已调度但尚未触发的重试。"""

        return self._state.pending_timer is not None

    def handle_error(self, fault: Fault) -> ResourceError:
        error = classify(fault, retry_count=self._state.retry_count)
        self._state.error = error
        return error

    def retry(self, operation: Callable[[], None]) -> Optional[float]:
        delay = self._scheduler.schedule_retry(self._state, self.config, operation)
        if delay is not None:
            logger.info(
                f"Retry scheduled for {self.name}",
                extra={"extra": {
                    "resource": self.name,
                    "attempt": self._state.retry_count,
                    "max_retries": self.config.max_retries,
                    "delay_ms": delay,
                }},
            )
        return delay

    def reset(self) -> None:
        self._scheduler.reset(self._state)

    def set_retry_count(self, count: int) -> None:
        """手动设置重试计数，仅供测试使用。"""

        self._state.retry_count = count
