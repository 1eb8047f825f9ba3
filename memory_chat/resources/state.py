"""可观察的资源状态。

- Signal: 单值可观察容器，用作派生资源的键（例如选中的会话 id）。
- ResourceState: {status, value, error}，每次状态流转都会通知订阅者。
- Subscription: 订阅本身是可检查的对象，带名字，可单独退订。
- attach_error_handler: 在资源与 ResourceErrorHandler 之间注册两条常驻订阅：
  进入 error 时分类并保存错误，进入 resolved 时重置重试状态。
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Generic, List, Literal, Optional, Tuple, TypeVar, TYPE_CHECKING

from memory_chat.domain.faults import Fault

if TYPE_CHECKING:
    from memory_chat.resources.errors import ResourceError
    from memory_chat.resources.retry import ResourceErrorHandler


T = TypeVar("T")
Status = Literal["idle", "loading", "resolved", "error"]


@dataclass(eq=False)
class Subscription:
    """一条订阅。unsubscribe 之后不会再收到通知。"""

    name: str
    listener: Callable[[Any], None]
    _owner: Any = field(default=None, repr=False)
    active: bool = True

    def unsubscribe(self) -> None:
        if not self.active:
            return
        self.active = False
        if self._owner is not None:
            self._owner._remove(self)


class _Observable:
    def __init__(self) -> None:
        self._subscriptions: List[Subscription] = []

    @property
    def subscriptions(self) -> Tuple[Subscription, ...]:
        return tuple(self._subscriptions)

    def subscribe(self, listener: Callable[[Any], None], name: Optional[str] = None) -> Subscription:
        sub = Subscription(name=name or getattr(listener, "__name__", "listener"), listener=listener, _owner=self)
        self._subscriptions.append(sub)
        return sub

    def _remove(self, sub: Subscription) -> None:
        if sub in self._subscriptions:
            self._subscriptions.remove(sub)

    def _notify(self, payload: Any) -> None:
        # 通知过程中可能有订阅被移除，遍历快照
        for sub in list(self._subscriptions):
            if sub.active:
                sub.listener(payload)


class Signal(_Observable, Generic[T]):
    """单值信号，只在值真正变化时通知订阅者。"""

    def __init__(self, initial: Optional[T] = None):
        super().__init__()
        self._value = initial

    def current(self) -> Optional[T]:
        return self._value

    def set(self, value: Optional[T]) -> bool:
        if value == self._value:
            return False
        self._value = value
        self._notify(value)
        return True


class ResourceState(_Observable, Generic[T]):
    """资源状态容器。

    生命周期：创建时为 idle；发起加载进入 loading；完成后进入 resolved（写入 value、清空 error）
    或 error（写入 error）。状态流转由发起加载的一方驱动。
    """

    def __init__(self, name: str = "resource"):
        super().__init__()
        self.name = name
        self._status: Status = "idle"
        self._value: Optional[T] = None
        self._error: Optional[Fault] = None

    @property
    def status(self) -> Status:
        return self._status

    @property
    def value(self) -> Optional[T]:
        return self._value

    @property
    def error(self) -> Optional[Fault]:
        return self._error

    @property
    def is_loading(self) -> bool:
        return self._status == "loading"

    def mark_idle(self) -> None:
        self._status = "idle"
        self._value = None
        self._error = None
        self._notify(self)

    def mark_loading(self, keep_value: bool = True) -> None:
        self._status = "loading"
        if not keep_value:
            self._value = None
        self._notify(self)

    def mark_resolved(self, value: T) -> None:
        self._status = "resolved"
        self._value = value
        self._error = None
        self._notify(self)

    def mark_error(self, fault: Fault) -> None:
        self._status = "error"
        self._error = fault
        self._notify(self)


def attach_error_handler(
    state: ResourceState,
    handler: "ResourceErrorHandler",
    on_error: Optional[Callable[[ResourceState, "ResourceError"], None]] = None,
) -> Tuple[Subscription, Subscription]:
    """注册 classify-on-error 与 reset-on-resolve 两条常驻订阅。"""

    def classify_on_error(s: ResourceState) -> None:
        if s.status != "error" or s.error is None:
            return
        error = handler.handle_error(s.error)
        if on_error is not None:
            on_error(s, error)

    def reset_on_resolve(s: ResourceState) -> None:
        if s.status == "resolved":
            handler.reset()

    return (
        state.subscribe(classify_on_error, name=f"{state.name}:classify-on-error"),
        state.subscribe(reset_on_resolve, name=f"{state.name}:reset-on-resolve"),
    )
