"""Stateless single-turn chat (POST /api/chat)."""

from typing import List, Optional

from memory_chat.config.settings import settings
from memory_chat.domain.models import Message, Role
from memory_chat.infrastructure.logging.logger import logger
from memory_chat.providers.base import ChatBackend
from memory_chat.session.coordinator import FAILURE_MESSAGE
from memory_chat.session.input import can_send, sanitize_input, validation_error


GREETING = "Hello, how can I help you today?"


class SimpleChatSession:
    """No history on the backend; every message is answered on its own."""

    def __init__(self, backend: ChatBackend, *, max_length: Optional[int] = None):
        self._backend = backend
        self.max_length = max_length or settings.max_message_length
        self.messages: List[Message] = [Message(content=GREETING, role="assistant")]
        self.user_input = ""
        self.is_loading = False

    @property
    def validation_error(self) -> Optional[str]:
        return validation_error(self.user_input, self.max_length)

    @property
    def can_send(self) -> bool:
        return can_send(self.user_input, self.max_length, self.is_loading)

    def _append(self, content: str, role: Role = "user") -> None:
        self.messages = [*self.messages, Message(content=content, role=role)]

    async def submit(self, text: Optional[str] = None) -> bool:
        if text is not None and not self.is_loading:
            self.user_input = text
        if not self.can_send:
            return False
        content = sanitize_input(self.user_input.strip())
        if not content:
            return False

        self._append(content)
        self.is_loading = True
        try:
            reply = await self._backend.simple_chat(content)
        except Exception as exc:
            logger.error(f"Simple chat failed: {exc}", extra={"extra": {"error": str(exc)}})
            self._append(FAILURE_MESSAGE, "assistant")
        else:
            self._append(reply.message, "assistant")
        finally:
            self.user_input = ""
            self.is_loading = False
        return True
