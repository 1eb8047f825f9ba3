"""Minimal demonstration of a memory chat session against a running backend."""

import asyncio

from memory_chat.api.service import create_session, get_default_service


async def main() -> None:
    service = get_default_service()
    session = create_session(service)
    service.start()
    await service.chats.wait()
    print("Chats:", [c.description for c in service.chats_state.value or []])

    await session.submit("你好，请介绍一下自己。")
    await service.messages.wait()
    for msg in session.messages:
        print(f"{msg.role}: {msg.content}")

    view = service.messages_error_view()
    if view.error is not None:
        print("Error:", view.status_message)


if __name__ == "__main__":
    asyncio.run(main())
