"""可注入的定时器能力。

RetryScheduler 不直接调用 loop.call_later，而是依赖 TimerService 协议，
测试里可以替换为手动推进的实现，避免真实等待。
"""

import asyncio
from typing import Callable, Optional, Protocol


class TimerHandle(Protocol):
    def cancel(self) -> None:
        ...


class TimerService(Protocol):
    """定时器协议：schedule(delay_ms, callback) -> 可取消的句柄。"""

    def schedule(self, delay_ms: float, callback: Callable[[], None]) -> TimerHandle:
        ...


class AsyncioTimerService:
    """基于事件循环 call_later 的实现，延迟单位为毫秒。"""

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        self._loop = loop

    def schedule(self, delay_ms: float, callback: Callable[[], None]) -> asyncio.TimerHandle:
        loop = self._loop or asyncio.get_running_loop()
        return loop.call_later(delay_ms / 1000.0, callback)
