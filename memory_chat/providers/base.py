"""后端接口抽象。

会话层不直接依赖 HTTP 客户端，而是依赖此协议：

- list_chats:    GET  /api/<resource>
- get_messages:  GET  /api/<resource>/{id}
- start_chat:    POST /api/<resource>/start
- continue_chat: POST /api/<resource>/{id}
- simple_chat:   POST /api/chat（无状态单轮对话）

失败时抛出 domain.exceptions 中的异常，由资源层转换为故障并分类。
"""

from typing import List, Protocol

from memory_chat.domain.models import ChatStartResponse, ChatSummary, Message, SimpleChatReply


class ChatBackend(Protocol):
    name: str

    async def list_chats(self) -> List[ChatSummary]:
        ...

    async def get_messages(self, chat_id: str) -> List[Message]:
        ...

    async def start_chat(self, message: str) -> ChatStartResponse:
        ...

    async def continue_chat(self, chat_id: str, message: str) -> Message:
        ...

    async def simple_chat(self, message: str) -> SimpleChatReply:
        ...
