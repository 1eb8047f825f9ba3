"""后端集成层。

- base: 定义后端协议 ChatBackend。
- http_client: 基于 httpx 的默认实现。
"""

from memory_chat.config.settings import settings
from memory_chat.providers.base import ChatBackend
from memory_chat.providers.http_client import HttpChatBackend


def create_backend(cfg=None) -> ChatBackend:
    """根据配置创建后端实例。"""

    return HttpChatBackend(cfg or settings)
