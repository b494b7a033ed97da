"""Tests for websocket room bookkeeping and event publishing."""

from __future__ import annotations

import asyncio

import anyio

from app.application.realtime import task_chat_room, user_channel
from app.infrastructure.notifications import ConnectionManager, RealtimeEventPublisher


class FakeWebSocket:
    def __init__(self, *, broken: bool = False) -> None:
        self.accepted = False
        self.sent: list[dict] = []
        self._broken = broken

    async def accept(self) -> None:
        self.accepted = True

    async def send_json(self, message: dict) -> None:
        if self._broken:
            raise RuntimeError("connection closed")
        self.sent.append(message)


def test_room_names() -> None:
    assert user_channel(9) == "9"
    assert task_chat_room(42) == "task_chat_42"


def test_connect_join_leave_and_disconnect() -> None:
    manager = ConnectionManager()
    socket = FakeWebSocket()

    asyncio.run(manager.connect(socket, "9"))
    manager.join("task_chat_42", socket)

    assert socket.accepted is True
    assert manager.members("9") == 1
    assert manager.members("task_chat_42") == 1

    manager.leave("task_chat_42", socket)
    assert manager.members("task_chat_42") == 0

    manager.join("task_chat_42", socket)
    manager.disconnect(socket)
    assert manager.members("9") == 0
    assert manager.members("task_chat_42") == 0


def test_broadcast_drops_dead_sockets() -> None:
    manager = ConnectionManager()
    healthy = FakeWebSocket()
    broken = FakeWebSocket(broken=True)
    manager.join("task_chat_42", healthy)
    manager.join("task_chat_42", broken)

    asyncio.run(manager.broadcast("task_chat_42", {"type": "ping"}))

    assert healthy.sent == [{"type": "ping"}]
    assert manager.members("task_chat_42") == 1


def test_publisher_delivers_to_user_channel_from_the_event_loop() -> None:
    manager = ConnectionManager()
    publisher = RealtimeEventPublisher(manager)
    socket = FakeWebSocket()
    other = FakeWebSocket()
    manager.join(user_channel(9), socket)
    manager.join(user_channel(3), other)
    payload = {"systemCount": 1, "chatCount": 2}

    async def emit() -> None:
        publisher.emit_to_user(9, "unread_count_updated", payload)
        payload["chatCount"] = 99
        await asyncio.sleep(0)
        await asyncio.sleep(0)

    asyncio.run(emit())

    assert socket.sent == [
        {"type": "unread_count_updated", "data": {"systemCount": 1, "chatCount": 2}}
    ]
    assert other.sent == []


def test_publisher_never_raises_without_an_event_loop(caplog) -> None:
    manager = ConnectionManager()
    publisher = RealtimeEventPublisher(manager)
    socket = FakeWebSocket()
    manager.join("task_chat_42", socket)

    publisher.emit_to_room("task_chat_42", "new_chat_message", {"id": 1})

    assert socket.sent == []
    assert "Could not emit" in caplog.text


def test_publisher_does_not_block_worker_threads_on_delivery() -> None:
    class SlowManager:
        def __init__(self) -> None:
            self.release = anyio.Event()
            self.sent: list[tuple[str, dict]] = []

        async def broadcast(self, room: str, message: dict) -> None:
            await self.release.wait()
            self.sent.append((room, message))

    async def main() -> list[tuple[str, dict]]:
        manager = SlowManager()
        publisher = RealtimeEventPublisher(manager)

        # Delivery is still pending when the worker thread gets control back.
        await anyio.to_thread.run_sync(
            publisher.emit_to_room, "task_chat_42", "new_chat_message", {"id": 1}
        )
        assert manager.sent == []

        manager.release.set()
        with anyio.fail_after(1):
            while not manager.sent:
                await anyio.sleep(0.01)
        return manager.sent

    sent = anyio.run(main)

    assert sent == [("task_chat_42", {"type": "new_chat_message", "data": {"id": 1}})]
