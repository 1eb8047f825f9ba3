"""以键派生的资源绑定。

DerivedResourceBinding 把一个键信号（例如选中的会话 id）与一个资源连接起来：

- 键变化时用 fetch_fn(key) 重新求值；
- fetch_fn 返回 None（通常因为键为空）时不发请求，资源回到 idle；
- 否则发起加载并经过 loading；
- 请求带着发起时的键，完成时与当前键比较，不一致的响应一律丢弃。

键从 A 变为同一个 A 不会触发重新加载（Signal 只在值变化时通知）。
"""

from typing import Any, Callable, Optional, Tuple, TypeVar

from memory_chat.resources.resource import Loader, RequestTag, Resource
from memory_chat.resources.state import Signal, Subscription


T = TypeVar("T")


class DerivedResourceBinding(Resource[T]):
    def __init__(
        self,
        key_signal: Signal,
        fetch_fn: Callable[[Any], Optional[Loader]],
        *,
        name: str = "derived-resource",
        on_key_change: Optional[Callable[[Any], None]] = None,
    ):
        super().__init__(name=name)
        self.key_signal = key_signal
        self._fetch_fn = fetch_fn
        self._on_key_change = on_key_change
        self.subscription: Subscription = key_signal.subscribe(self._key_changed, name=f"{name}:key")

    def _key_changed(self, key: Any) -> None:
        if self._on_key_change is not None:
            self._on_key_change(key)
        # 旧键的值不属于新键，加载期间不再对外可见
        self.reload(keep_value=False)

    def _next_request(self) -> Optional[Tuple[Any, Loader]]:
        key = self.key_signal.current()
        loader = self._fetch_fn(key)
        if loader is None:
            return None
        return key, loader

    def is_current(self, tag: RequestTag) -> bool:
        return super().is_current(tag) and tag.key == self.key_signal.current()

    def close(self) -> None:
        self.subscription.unsubscribe()
