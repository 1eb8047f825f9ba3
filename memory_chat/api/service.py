"""对外 API 服务模块。

提供简化的函数接口供上层应用（页面 / 命令行）调用。
"""

from typing import Optional

from memory_chat.config.settings import settings
from memory_chat.providers import create_backend
from memory_chat.providers.base import ChatBackend
from memory_chat.session.coordinator import SessionCoordinator
from memory_chat.session.service import MemoryChatService
from memory_chat.session.simple_chat import SimpleChatSession


_backend: Optional[ChatBackend] = None
_service: Optional[MemoryChatService] = None


def get_default_backend() -> ChatBackend:
    global _backend
    if _backend is None:
        _backend = create_backend(settings)
    return _backend


def get_default_service() -> MemoryChatService:
    """获取默认的会话服务实例（单例）。"""
    global _service
    if _service is None:
        _service = MemoryChatService(get_default_backend(), cfg=settings)
    return _service


def create_session(service: Optional[MemoryChatService] = None) -> SessionCoordinator:
    """为一个页面创建会话协调器。

    Args:
        service: 会话服务（可选，不提供则使用默认单例）

    Returns:
        绑定到该服务选中状态的 SessionCoordinator
    """
    return SessionCoordinator(service or get_default_service(), max_length=settings.max_message_length)


def create_simple_session(backend: Optional[ChatBackend] = None) -> SimpleChatSession:
    return SimpleChatSession(backend or get_default_backend(), max_length=settings.max_message_length)
