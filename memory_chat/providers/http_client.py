"""HTTP 后端适配器。

本模块负责：

1. 把会话层的调用转换为后端 JSON 接口请求。
2. 调用 HTTP 接口并把网络 / 状态码异常包装为统一的业务异常。
3. 把响应 JSON 解析为 domain.models 中的数据结构。
"""

from typing import Any, Dict, List, Optional
from urllib.parse import quote

import httpx

from memory_chat.config.settings import settings
from memory_chat.domain.exceptions import ApiError, BusinessError, NetworkError, RateLimitError
from memory_chat.domain.models import ChatStartResponse, ChatSummary, Message, SimpleChatReply


class HttpChatBackend:
    """基于 httpx.AsyncClient 的后端客户端。"""

    name = "http"

    def __init__(self, cfg=settings):
        # Settings 里包含 base_url、资源名、超时等配置
        self._settings = cfg

    @property
    def api_root(self) -> str:
        return self._settings.api_root

    async def list_chats(self) -> List[ChatSummary]:
        data = await self._request("GET", self.api_root)
        return [ChatSummary.from_payload(item) for item in self._as_list(data)]

    async def get_messages(self, chat_id: str) -> List[Message]:
        data = await self._request("GET", f"{self.api_root}/{quote(chat_id, safe='')}")
        return [Message.from_payload(item) for item in self._as_list(data)]

    async def start_chat(self, message: str) -> ChatStartResponse:
        data = await self._request("POST", f"{self.api_root}/start", {"message": message})
        return ChatStartResponse.from_payload(self._as_dict(data))

    async def continue_chat(self, chat_id: str, message: str) -> Message:
        data = await self._request("POST", f"{self.api_root}/{quote(chat_id, safe='')}", {"message": message})
        return Message.from_payload(self._as_dict(data))

    async def simple_chat(self, message: str) -> SimpleChatReply:
        data = await self._request("POST", self._settings.simple_chat_path, {"message": message})
        return SimpleChatReply.from_payload(self._as_dict(data))

    # ---- 辅助方法 ----

    async def _request(self, method: str, path: str, payload: Optional[Dict[str, Any]] = None) -> Any:
        try:
            async with httpx.AsyncClient(
                base_url=self._settings.api_base_url,
                timeout=self._settings.http_timeout,
                trust_env=False,
            ) as client:
                if method == "GET":
                    resp = await client.get(path, headers={"Accept": "application/json"})
                else:
                    resp = await client.post(
                        path,
                        json=payload,
                        headers={"Content-Type": "application/json", "Accept": "application/json"},
                    )
        except httpx.RequestError as e:
            # 网络错误：DNS 失败、连接超时等，没有状态码
            raise NetworkError(message=str(e), path=path)
        if resp.status_code == 429:
            raise RateLimitError(
                code="RATE_LIMIT",
                message=self._describe(resp),
                http_status=429,
                app_message=self._app_message(resp),
                path=path,
                body=resp.text,
            )
        if resp.status_code >= 400:
            raise ApiError(
                code="API_ERROR",
                message=self._describe(resp),
                http_status=resp.status_code,
                app_message=self._app_message(resp),
                path=path,
                body=resp.text,
            )
        try:
            return resp.json()
        except ValueError as e:
            raise BusinessError(code="INVALID_RESPONSE", message=f"Invalid JSON from {path}: {e}")

    @staticmethod
    def _describe(resp) -> str:
        """状态行描述，响应体只放进 extra，避免把 HTML 错误页当作提示文案。"""

        return f"HTTP {resp.status_code} {resp.reason_phrase or ''}".strip()

    @staticmethod
    def _app_message(resp) -> Optional[str]:
        """提取后端错误响应体中的 message 字段。"""

        try:
            data = resp.json()
        except ValueError:
            return None
        if isinstance(data, dict):
            message = data.get("message")
            if isinstance(message, str) and message.strip():
                return message
        return None

    @staticmethod
    def _as_list(data: Any) -> List[Dict[str, Any]]:
        if not isinstance(data, list):
            raise BusinessError(code="INVALID_RESPONSE", message="Expected a JSON array")
        return [item for item in data if isinstance(item, dict)]

    @staticmethod
    def _as_dict(data: Any) -> Dict[str, Any]:
        if not isinstance(data, dict):
            raise BusinessError(code="INVALID_RESPONSE", message="Expected a JSON object")
        return data
