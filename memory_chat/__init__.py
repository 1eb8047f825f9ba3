"""Memory Chat 顶层包。

该包实现对话式 Web 前端背后的资源同步层：
错误分类、指数退避重试、以选中会话为键的派生资源，
以及在其之上的会话选择与乐观追加逻辑。
"""

from memory_chat.session.coordinator import SessionCoordinator
from memory_chat.session.service import MemoryChatService

__all__ = ["MemoryChatService", "SessionCoordinator"]
