"""对话数据模型。

与后端 JSON 一一对应的数据结构：

- ChatSummary: 会话列表中的一项 {id, description}。
- Message: 一条对话消息 {content, role}。
- ChatStartResponse: 开启新会话的响应 {chatId, message, description}。
- SimpleChatReply: 无状态单轮对话的响应 {message}。

各结构的 from_payload 负责把后端字段（含大写的 role/type 取值）转换为内部表示。
"""

from dataclasses import dataclass
from typing import Any, Dict, Literal


Role = Literal["user", "assistant"]


def _parse_role(raw: Any) -> Role:
    # 后端有的版本返回 role，有的返回 type=USER/ASSISTANT
    value = str(raw or "assistant").lower()
    return "user" if value == "user" else "assistant"


@dataclass(frozen=True)
class Message:
    """一条对话消息。"""

    content: str
    role: Role

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "Message":
        return cls(
            content=payload.get("content") or "",
            role=_parse_role(payload.get("role") or payload.get("type")),
        )

    def to_payload(self) -> Dict[str, Any]:
        return {"content": self.content, "role": self.role}


@dataclass(frozen=True)
class ChatSummary:
    """会话列表项。"""

    id: str
    description: str

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "ChatSummary":
        return cls(id=str(payload["id"]), description=payload.get("description") or "")


@dataclass(frozen=True)
class ChatStartResponse:
    """POST /api/<resource>/start 的响应。"""

    chat_id: str
    message: str
    description: str

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "ChatStartResponse":
        return cls(
            chat_id=str(payload["chatId"]),
            message=payload.get("message") or "",
            description=payload.get("description") or "",
        )


@dataclass(frozen=True)
class SimpleChatReply:
    """POST /api/chat 的响应。"""

    message: str

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "SimpleChatReply":
        return cls(message=payload.get("message") or "")
