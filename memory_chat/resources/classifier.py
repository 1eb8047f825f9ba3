"""错误分类器。

把 Fault 映射为 ResourceError，纯函数、无副作用。规则按优先级：

1. 传输故障 status == 0           -> NETWORK，可重试
2. 传输故障 500 <= status < 600   -> SERVER_ERROR，可重试，始终使用通用提示
3. 传输故障 404                   -> NOT_FOUND
4. 传输故障 401                   -> UNAUTHORIZED
5. 传输故障 403                   -> FORBIDDEN
6. 其他传输故障                   -> CLIENT_ERROR_OTHER，优先使用后端提示
7. 非传输故障                     -> GENERIC，可重试
"""

from datetime import datetime, timezone
from typing import Optional

from memory_chat.domain.faults import Fault
from memory_chat.resources.errors import ErrorCategory, ResourceError


NETWORK_MESSAGE = "Network error. Please check your internet connection."
SERVER_ERROR_MESSAGE = "Server error. Please try again later."
NOT_FOUND_MESSAGE = "Resource not found."
UNAUTHORIZED_MESSAGE = "Authentication required."
FORBIDDEN_MESSAGE = "Access denied."
DEFAULT_CLIENT_MESSAGE = "An error occurred."
DEFAULT_GENERIC_MESSAGE = "An unexpected error occurred."

_FIXED_MESSAGES = {
    ErrorCategory.NETWORK: NETWORK_MESSAGE,
    ErrorCategory.SERVER_ERROR: SERVER_ERROR_MESSAGE,
    ErrorCategory.NOT_FOUND: NOT_FOUND_MESSAGE,
    ErrorCategory.UNAUTHORIZED: UNAUTHORIZED_MESSAGE,
    ErrorCategory.FORBIDDEN: FORBIDDEN_MESSAGE,
}


def categorize(fault: Fault) -> ErrorCategory:
    if fault.kind == "transport":
        status = fault.status
        if status == 0:
            return ErrorCategory.NETWORK
        if 500 <= status < 600:
            return ErrorCategory.SERVER_ERROR
        if status == 404:
            return ErrorCategory.NOT_FOUND
        if status == 401:
            return ErrorCategory.UNAUTHORIZED
        if status == 403:
            return ErrorCategory.FORBIDDEN
        return ErrorCategory.CLIENT_ERROR_OTHER
    if fault.kind == "generic":
        return ErrorCategory.GENERIC
    raise ValueError(f"Unknown fault kind: {fault.kind!r}")


def _first_text(*candidates: Optional[str]) -> Optional[str]:
    for text in candidates:
        if text and text.strip():
            return text
    return None


def user_message(fault: Fault, category: ErrorCategory) -> str:
    """生成面向用户的错误提示。"""

    fixed = _FIXED_MESSAGES.get(category)
    if fixed is not None:
        return fixed
    if category is ErrorCategory.CLIENT_ERROR_OTHER:
        return _first_text(fault.app_message, fault.message) or DEFAULT_CLIENT_MESSAGE
    return _first_text(fault.message) or DEFAULT_GENERIC_MESSAGE


def classify(fault: Fault, retry_count: int = 0) -> ResourceError:
    """把故障归类为 ResourceError。

    Args:
        fault: 待分类的故障。
        retry_count: 当前重试计数，原样写入结果，不做归零。
    """

    category = categorize(fault)
    return ResourceError(
        cause=fault,
        message=user_message(fault, category),
        retry_count=retry_count,
        timestamp=datetime.now(timezone.utc),
        is_retryable=category.is_retryable,
        category=category,
    )
