"""会话协调器。

状态只有两种：NoSelection 与 Selected(id)。select / clear 触发状态切换，
每次选中的会话真正变化时，本地消息列表都会被同步清空（早于任何网络响应）。

发送消息的流程：

1. 校验：空白输入、超长输入、已有请求在途时拒绝。
2. 乐观追加用户消息，然后再发起网络请求。
3. NoSelection 下开启新会话，成功后选中新会话并刷新会话列表；
   Selected(id) 下继续会话，成功后追加回复，若发送前消息数 <= 2 则刷新会话列表。
4. 任何失败都追加一条助手角色的失败提示，不向外抛出异常。
5. 请求结束后（无论成败）才清空输入缓冲并放下在途标记。
"""

from dataclasses import dataclass
from typing import List, Optional, Union

from memory_chat.config.settings import settings
from memory_chat.domain.models import Message, Role
from memory_chat.infrastructure.logging.logger import logger
from memory_chat.resources.state import ResourceState
from memory_chat.session.input import can_send, sanitize_input, validation_error
from memory_chat.session.service import MemoryChatService


FAILURE_MESSAGE = "Sorry, I am unable to process your request at the moment."
# 发送前消息数不超过该值时，新会话的标题 / 描述可能刚生成，需要刷新列表
TITLE_REFRESH_THRESHOLD = 2


@dataclass(frozen=True)
class NoSelection:
    pass


@dataclass(frozen=True)
class Selected:
    chat_id: str


SessionState = Union[NoSelection, Selected]


class SessionCoordinator:
    def __init__(self, service: MemoryChatService, *, max_length: Optional[int] = None):
        self._service = service
        self.max_length = max_length or settings.max_message_length
        self.messages: List[Message] = []
        self.user_input = ""
        self.is_loading = False
        # 在途发送期间乐观追加的消息从该下标开始；没有在途发送时为 None
        self._pending_from: Optional[int] = None
        self.subscriptions = (
            service.selected_chat_id.subscribe(self._clear_messages, name="session:clear-on-select"),
            service.messages_state.subscribe(self._sync_history, name="session:sync-history"),
        )

    # ---- 状态 ----

    @property
    def state(self) -> SessionState:
        chat_id = self._service.selected_chat_id.current()
        return Selected(chat_id) if chat_id else NoSelection()

    def select(self, chat_id: str) -> None:
        self._service.select_chat(chat_id)

    def clear(self) -> None:
        self._service.clear_selection()

    def _clear_messages(self, _chat_id: Optional[str]) -> None:
        self.messages = []
        self._pending_from = None

    def _sync_history(self, state: ResourceState) -> None:
        if state.status != "resolved" or state.value is None:
            return
        history = list(state.value)
        if self._pending_from is None:
            self.messages = history
            return
        # 历史在发送途中返回：保留乐观追加的消息，叠在历史之后
        self.messages = history + self.messages[self._pending_from:]
        self._pending_from = len(history)

    def _append(self, content: str, role: Role = "user") -> None:
        self.messages = [*self.messages, Message(content=content, role=role)]

    # ---- 输入 ----

    @property
    def validation_error(self) -> Optional[str]:
        return validation_error(self.user_input, self.max_length)

    @property
    def can_send(self) -> bool:
        return can_send(self.user_input, self.max_length, self.is_loading)

    # ---- 发送 ----

    async def submit(self, text: Optional[str] = None) -> bool:
        """发送当前输入；被拒绝时返回 False。"""

        if text is not None and not self.is_loading:
            self.user_input = text
        if not self.can_send:
            return False
        content = sanitize_input(self.user_input.strip())
        if not content:
            return False

        chat_id = self._service.selected_chat_id.current()
        prior_count = len(self.messages)
        self._append(content)
        self._pending_from = prior_count
        self.is_loading = True
        try:
            if chat_id:
                await self._continue_chat(chat_id, content, prior_count)
            else:
                await self._start_chat(content)
        finally:
            self.user_input = ""
            self.is_loading = False
            self._pending_from = None
        return True

    async def _start_chat(self, content: str) -> None:
        try:
            response = await self._service.start_new_chat(content)
        except Exception as exc:
            self._report_failure(exc, None)
            return
        if self._service.selected_chat_id.current() is None:
            self._service.select_chat(response.chat_id)
        else:
            logger.debug(
                "Selection changed while starting chat, keeping current selection",
                extra={"extra": {"chat_id": response.chat_id}},
            )
        self._service.invalidate_chats()

    async def _continue_chat(self, chat_id: str, content: str, prior_count: int) -> None:
        try:
            reply = await self._service.continue_chat(chat_id, content)
        except Exception as exc:
            self._report_failure(exc, chat_id)
            return
        if self._pending_from is not None:
            # 历史可能在途中落地，按用户消息当前所在位置计数
            prior_count = self._pending_from
        if self._is_current(chat_id):
            self._append(reply.content, "assistant")
        if prior_count <= TITLE_REFRESH_THRESHOLD:
            self._service.invalidate_chats()

    def _is_current(self, chat_id: Optional[str]) -> bool:
        if self._service.selected_chat_id.current() == chat_id:
            return True
        logger.debug("Dropped reply for deselected chat", extra={"extra": {"chat_id": chat_id}})
        return False

    def _report_failure(self, exc: Exception, chat_id: Optional[str]) -> None:
        logger.error(
            f"Chat request failed: {exc}",
            extra={"extra": {"chat_id": chat_id, "error": str(exc)}},
        )
        if self._is_current(chat_id):
            self._append(FAILURE_MESSAGE, "assistant")

    def close(self) -> None:
        for sub in self.subscriptions:
            sub.unsubscribe()
