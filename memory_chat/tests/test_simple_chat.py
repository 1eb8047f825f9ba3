import pytest

from memory_chat.domain.exceptions import NetworkError
from memory_chat.domain.models import Message
from memory_chat.session.coordinator import FAILURE_MESSAGE
from memory_chat.session.simple_chat import GREETING, SimpleChatSession
from memory_chat.tests.fakes import FakeBackend


@pytest.mark.asyncio
async def test_simple_chat_round_trip():
    backend = FakeBackend()
    session = SimpleChatSession(backend, max_length=100)
    assert session.messages == [Message(GREETING, "assistant")]

    assert await session.submit("ping")
    assert session.messages[1:] == [Message("ping", "user"), Message("re: ping", "assistant")]
    assert session.user_input == ""
    assert not session.is_loading


@pytest.mark.asyncio
async def test_simple_chat_failure():
    backend = FakeBackend()
    backend.fail_next("simple_chat", NetworkError(message="offline"))
    session = SimpleChatSession(backend, max_length=100)

    assert await session.submit("ping")
    assert session.messages[-1] == Message(FAILURE_MESSAGE, "assistant")
    assert not await session.submit("   ")
    assert backend.count("simple_chat") == 1
