"""可分类的故障变体。

资源加载失败时，原始异常会被转换为下面两种形态之一，并以 kind 字段区分：

- TransportFault(kind="transport"): 传输层故障，带数值状态码（0 表示没有收到响应）。
- GenericFault(kind="generic"): 其他任意异常。

分类器只依赖 kind 判别，不做运行时类型探测。
"""

from dataclasses import dataclass, field
from typing import Literal, Optional, Union

import httpx

from memory_chat.domain.exceptions import ApiError, NetworkError


@dataclass(frozen=True)
class TransportFault:
    status: int
    message: str = ""
    # 响应体里后端给出的 message 字段
    app_message: Optional[str] = None
    exc: Optional[BaseException] = field(default=None, compare=False, repr=False)
    kind: Literal["transport"] = "transport"


@dataclass(frozen=True)
class GenericFault:
    message: str = ""
    exc: Optional[BaseException] = field(default=None, compare=False, repr=False)
    kind: Literal["generic"] = "generic"


Fault = Union[TransportFault, GenericFault]


def _app_message_from_response(response: httpx.Response) -> Optional[str]:
    try:
        data = response.json()
    except ValueError:
        return None
    if isinstance(data, dict) and isinstance(data.get("message"), str):
        return data["message"]
    return None


def as_fault(exc: BaseException) -> Fault:
    """把任意异常转换为 Fault。"""

    if isinstance(exc, (NetworkError, ApiError)):
        return TransportFault(
            status=exc.http_status,
            message=exc.message,
            app_message=exc.extra.get("app_message"),
            exc=exc,
        )
    if isinstance(exc, httpx.HTTPStatusError):
        return TransportFault(
            status=exc.response.status_code,
            message=str(exc),
            app_message=_app_message_from_response(exc.response),
            exc=exc,
        )
    if isinstance(exc, httpx.RequestError):
        return TransportFault(status=0, message=str(exc), exc=exc)
    return GenericFault(message=str(exc), exc=exc)
