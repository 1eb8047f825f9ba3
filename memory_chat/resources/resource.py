"""加载驱动的资源。

Resource 持有一个 ResourceState，并负责发起加载：每次加载都会带上一个 RequestTag，
完成时只有仍是“当前请求”的结果才会写回状态，过期结果直接丢弃。
已经发出的请求不会被取消，只会被忽略。
"""

import asyncio
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Generic, Optional, Set, Tuple, TypeVar

from memory_chat.domain.faults import as_fault
from memory_chat.infrastructure.logging.logger import logger
from memory_chat.resources.state import ResourceState


T = TypeVar("T")
Loader = Callable[[], Awaitable[T]]


@dataclass(frozen=True)
class RequestTag:
    """请求标记：发起时的键与序号。"""

    key: Any
    seq: int


class Resource(Generic[T]):
    def __init__(self, loader: Optional[Loader] = None, *, name: str = "resource"):
        self.name = name
        self.state: ResourceState[T] = ResourceState(name=name)
        self._loader = loader
        self._seq = 0
        self._current: Optional[RequestTag] = None
        self._tasks: Set["asyncio.Task[None]"] = set()

    # ---- 子类扩展点 ----

    def _next_request(self) -> Optional[Tuple[Any, Loader]]:
        """返回 (key, loader)；返回 None 表示当前不应发起请求。"""

        if self._loader is None:
            return None
        return None, self._loader

    # ---- 加载 ----

    def reload(self, *, keep_value: bool = True) -> Optional["asyncio.Task[None]"]:
        """从任意状态重新进入 loading 并发起加载。

        需要在事件循环内调用；没有可发起的请求时让状态回到 idle 并返回 None。
        keep_value=False 时进入 loading 的同时丢弃旧值。
        """

        request = self._next_request()
        self._seq += 1
        if request is None:
            self._current = None
            self.state.mark_idle()
            return None
        key, loader = request
        tag = RequestTag(key=key, seq=self._seq)
        self._current = tag
        self.state.mark_loading(keep_value)
        task = asyncio.get_running_loop().create_task(self._run(tag, loader))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    def is_current(self, tag: RequestTag) -> bool:
        return self._current == tag

    async def _run(self, tag: RequestTag, loader: Loader) -> None:
        try:
            value = await loader()
        except asyncio.CancelledError:
            raise
        except Exception as exc:
            if not self.is_current(tag):
                self._log_stale(tag)
                return
            # 失败作为状态保存，不再向外抛出
            self.state.mark_error(as_fault(exc))
            return
        if not self.is_current(tag):
            self._log_stale(tag)
            return
        self.state.mark_resolved(value)

    def _log_stale(self, tag: RequestTag) -> None:
        logger.debug(
            f"Dropped stale response for {self.name}",
            extra={"extra": {"resource": self.name, "key": tag.key, "seq": tag.seq}},
        )

    @property
    def pending(self) -> bool:
        return bool(self._tasks)

    async def wait(self) -> None:
        """等待当前所有在途请求结束（不取消）。"""

        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)
