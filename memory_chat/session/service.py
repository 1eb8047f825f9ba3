"""带记忆会话的资源服务。

MemoryChatService 持有两类资源及各自的错误处理：

- chats: 会话列表，GET /api/<resource>。
- messages: 选中会话的历史消息，GET /api/<resource>/{id}，以 selected_chat_id 为键派生；
  未选中会话时不发请求。

两个资源都通过 attach_error_handler 注册了常驻订阅：失败时分类并记录日志，成功时重置重试状态。
"""

from functools import partial
from typing import List, Optional

from memory_chat.config.settings import settings
from memory_chat.domain.models import ChatStartResponse, ChatSummary, Message
from memory_chat.infrastructure.logging.logger import logger
from memory_chat.providers.base import ChatBackend
from memory_chat.resources.binding import DerivedResourceBinding
from memory_chat.resources.errors import ResourceError, RetryConfig
from memory_chat.resources.presentation import ErrorView
from memory_chat.resources.resource import Resource
from memory_chat.resources.retry import ResourceErrorHandler, RetryScheduler
from memory_chat.resources.state import ResourceState, Signal, attach_error_handler
from memory_chat.resources.timers import TimerService


class MemoryChatService:
    def __init__(
        self,
        backend: ChatBackend,
        *,
        retry_config: Optional[RetryConfig] = None,
        timer: Optional[TimerService] = None,
        auto_retry: Optional[bool] = None,
        cfg=settings,
    ):
        self._backend = backend
        self.retry_config = retry_config or RetryConfig.from_settings(cfg)
        self.auto_retry = cfg.auto_retry if auto_retry is None else auto_retry

        scheduler = RetryScheduler(timer)
        self.chats_error_handler = ResourceErrorHandler(self.retry_config, scheduler=scheduler, name="chats")
        self.messages_error_handler = ResourceErrorHandler(self.retry_config, scheduler=scheduler, name="messages")

        # None 表示未选中任何会话
        self.selected_chat_id: Signal[str] = Signal()

        self.chats: Resource[List[ChatSummary]] = Resource(backend.list_chats, name="chats")
        self.messages: DerivedResourceBinding[List[Message]] = DerivedResourceBinding(
            self.selected_chat_id,
            self._messages_loader,
            name="messages",
            on_key_change=self._on_selection_changed,
        )

        self.subscriptions = attach_error_handler(
            self.chats.state,
            self.chats_error_handler,
            on_error=lambda state, error: self._on_load_error(self.chats, self.chats_error_handler, error),
        ) + attach_error_handler(
            self.messages.state,
            self.messages_error_handler,
            on_error=lambda state, error: self._on_load_error(self.messages, self.messages_error_handler, error),
        )

    # ---- 资源 ----

    def _messages_loader(self, chat_id: Optional[str]):
        if not chat_id:
            return None
        return partial(self._backend.get_messages, chat_id)

    def _on_selection_changed(self, chat_id: Optional[str]) -> None:
        logger.debug("Selected chat ID", extra={"extra": {"chat_id": chat_id}})
        # 切换会话后，上一个会话的错误与挂起重试不再相关
        self.messages_error_handler.reset()

    def _on_load_error(self, resource: Resource, handler: ResourceErrorHandler, error: ResourceError) -> None:
        cause = error.cause
        logger.error(
            f"Error loading {resource.name}",
            extra={"extra": {
                "resource": resource.name,
                "category": error.category.value,
                "status": getattr(cause, "status", None),
                "error": error.message,
                "retry_count": error.retry_count,
            }},
        )
        if self.auto_retry:
            handler.retry(resource.reload)

    def start(self) -> None:
        """首次加载会话列表，若已有选中会话则同时加载其历史。"""

        self.chats.reload()
        if self.selected_chat_id.current():
            self.messages.reload()

    @property
    def chats_state(self) -> ResourceState[List[ChatSummary]]:
        return self.chats.state

    @property
    def messages_state(self) -> ResourceState[List[Message]]:
        return self.messages.state

    # ---- 选择 ----

    def select_chat(self, chat_id: str) -> None:
        self.selected_chat_id.set(chat_id)

    def clear_selection(self) -> None:
        self.selected_chat_id.set(None)

    # ---- 写操作 ----

    async def start_new_chat(self, message: str) -> ChatStartResponse:
        return await self._backend.start_chat(message)

    async def continue_chat(self, chat_id: str, message: str) -> Message:
        return await self._backend.continue_chat(chat_id, message)

    def invalidate_chats(self) -> None:
        """标记会话列表需要重新加载。"""

        logger.debug("Chat list invalidated")
        self.chats.reload()

    # ---- 重试 / 刷新 ----

    def chats_error_view(self) -> ErrorView:
        return ErrorView.from_handler(
            self.chats_error_handler,
            retrying=self.chats.state.is_loading,
            title="Error Loading Chats",
        )

    def messages_error_view(self) -> ErrorView:
        return ErrorView.from_handler(
            self.messages_error_handler,
            retrying=self.messages.state.is_loading,
            title="Error Loading Messages",
        )

    def retry_load_chats(self) -> bool:
        return self.chats_error_view().trigger_retry(
            lambda: self.chats_error_handler.retry(self.chats.reload)
        )

    def retry_load_messages(self) -> bool:
        return self.messages_error_view().trigger_retry(
            lambda: self.messages_error_handler.retry(self.messages.reload)
        )

    def refresh_chats(self) -> None:
        """显式刷新：清空重试状态后重新加载，与重试路径无关。"""

        self.chats_error_handler.reset()
        self.chats.reload()

    def refresh_messages(self) -> None:
        self.messages_error_handler.reset()
        self.messages.reload()

    def close(self) -> None:
        for sub in self.subscriptions:
            sub.unsubscribe()
        self.messages.close()
        self.chats_error_handler.reset()
        self.messages_error_handler.reset()
