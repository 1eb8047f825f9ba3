import httpx
import pytest

from memory_chat.config.settings import Settings
from memory_chat.domain.exceptions import ApiError, BusinessError, NetworkError, RateLimitError
from memory_chat.domain.faults import as_fault
from memory_chat.domain.models import ChatStartResponse, ChatSummary, Message
from memory_chat.providers import create_backend
from memory_chat.providers.http_client import HttpChatBackend
from memory_chat.resources.classifier import classify


def _settings() -> Settings:
    return Settings(
        api_base_url="http://backend.test",
        api_resource="chat-memory",
        simple_chat_path="/api/chat",
        http_timeout=1.0,
    )


class Resp:
    def __init__(self, status_code=200, data=None, text=None, reason_phrase="OK"):
        self.status_code = status_code
        self.reason_phrase = reason_phrase
        self._data = data
        self.text = text if text is not None else str(data)

    def json(self):
        if isinstance(self._data, Exception):
            raise self._data
        return self._data


def _install(monkeypatch, resp=None, error=None):
    captured = {"requests": []}

    class Client:
        def __init__(self, *a, **kw):
            captured["client_kwargs"] = kw

        async def __aenter__(self):
            return self

        async def __aexit__(self, *a):
            return False

        async def get(self, url, **kw):
            captured["requests"].append(("GET", url, None))
            if error is not None:
                raise error
            return resp

        async def post(self, url, json=None, **kw):
            captured["requests"].append(("POST", url, json))
            if error is not None:
                raise error
            return resp

    monkeypatch.setattr("httpx.AsyncClient", Client)
    return captured


@pytest.mark.asyncio
async def test_list_chats(monkeypatch):
    captured = _install(monkeypatch, Resp(data=[{"id": "c1", "description": "first"}, {"id": 2}]))
    chats = await HttpChatBackend(_settings()).list_chats()
    assert chats == [ChatSummary(id="c1", description="first"), ChatSummary(id="2", description="")]
    assert captured["requests"] == [("GET", "/api/chat-memory", None)]
    assert captured["client_kwargs"]["base_url"] == "http://backend.test"
    assert captured["client_kwargs"]["trust_env"] is False


@pytest.mark.asyncio
async def test_get_messages_accepts_type_field(monkeypatch):
    captured = _install(
        monkeypatch,
        Resp(data=[{"content": "q", "type": "USER"}, {"content": "a", "role": "assistant"}]),
    )
    msgs = await HttpChatBackend(_settings()).get_messages("c 1")
    assert msgs == [Message("q", "user"), Message("a", "assistant")]
    assert captured["requests"][0][1] == "/api/chat-memory/c%201"


@pytest.mark.asyncio
async def test_start_and_continue(monkeypatch):
    captured = _install(monkeypatch, Resp(data={"chatId": "n1", "message": "hi", "description": "d"}))
    started = await HttpChatBackend(_settings()).start_chat("hi")
    assert started == ChatStartResponse(chat_id="n1", message="hi", description="d")
    assert captured["requests"] == [("POST", "/api/chat-memory/start", {"message": "hi"})]

    captured = _install(monkeypatch, Resp(data={"content": "reply", "role": "ASSISTANT"}))
    reply = await HttpChatBackend(_settings()).continue_chat("n1", "more")
    assert reply == Message("reply", "assistant")
    assert captured["requests"] == [("POST", "/api/chat-memory/n1", {"message": "more"})]


@pytest.mark.asyncio
async def test_simple_chat(monkeypatch):
    captured = _install(monkeypatch, Resp(data={"message": "pong"}))
    reply = await HttpChatBackend(_settings()).simple_chat("ping")
    assert reply.message == "pong"
    assert captured["requests"] == [("POST", "/api/chat", {"message": "ping"})]


@pytest.mark.asyncio
async def test_http_error_carries_status_and_app_message(monkeypatch):
    _install(monkeypatch, Resp(status_code=404, data={"message": "chat not found"}))
    with pytest.raises(ApiError) as exc_info:
        await HttpChatBackend(_settings()).get_messages("nope")
    assert exc_info.value.http_status == 404
    assert exc_info.value.extra["app_message"] == "chat not found"


@pytest.mark.asyncio
async def test_rate_limit(monkeypatch):
    _install(monkeypatch, Resp(status_code=429, data=ValueError("not json"), text="slow down"))
    with pytest.raises(RateLimitError) as exc_info:
        await HttpChatBackend(_settings()).list_chats()
    assert exc_info.value.http_status == 429
    assert exc_info.value.extra["app_message"] is None


@pytest.mark.asyncio
async def test_network_error_has_status_zero(monkeypatch):
    _install(monkeypatch, error=httpx.ConnectError("connection refused"))
    with pytest.raises(NetworkError) as exc_info:
        await HttpChatBackend(_settings()).list_chats()
    assert exc_info.value.http_status == 0
    assert exc_info.value.code == "NETWORK_ERROR"


@pytest.mark.asyncio
async def test_invalid_payload(monkeypatch):
    _install(monkeypatch, Resp(data={"not": "a list"}))
    with pytest.raises(BusinessError) as exc_info:
        await HttpChatBackend(_settings()).list_chats()
    assert exc_info.value.code == "INVALID_RESPONSE"


def test_create_backend_uses_settings():
    backend = create_backend(_settings())
    assert isinstance(backend, HttpChatBackend)
    assert backend.api_root == "/api/chat-memory"


@pytest.mark.asyncio
async def test_html_error_page_never_reaches_the_user(monkeypatch):
    page = "<html><body><h1>418 I'm a teapot</h1></body></html>"
    _install(
        monkeypatch,
        Resp(status_code=418, data=ValueError("not json"), text=page, reason_phrase="I'm a teapot"),
    )
    with pytest.raises(ApiError) as exc_info:
        await HttpChatBackend(_settings()).list_chats()
    assert exc_info.value.message == "HTTP 418 I'm a teapot"
    assert exc_info.value.extra["body"] == page

    err = classify(as_fault(exc_info.value))
    assert err.message == "HTTP 418 I'm a teapot"
    assert "<html>" not in err.message
