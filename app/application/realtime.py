"""Realtime channel interface used by the notification and chat use cases.

Users are addressed through a private channel named after their id and each
task chat through a room derived from the task id. Subscriptions are managed
by the transport; use cases only emit.
"""

from __future__ import annotations

from typing import Any, Protocol

EVENT_UNREAD_COUNT_UPDATED = "unread_count_updated"
EVENT_NEW_CHAT_MESSAGE = "new_chat_message"
EVENT_TASK_UPDATED = "task_updated"
EVENT_TASK_CHAT_STATUS_UPDATED = "task_chat_status_updated"


class RealtimeChannel(Protocol):
    """Fire-and-forget publisher of realtime events."""

    def emit_to_user(self, user_id: int, event: str, payload: Any) -> None:
        ...

    def emit_to_room(self, room: str, event: str, payload: Any) -> None:
        ...


def user_channel(user_id: int) -> str:
    """Return the channel name of ``user_id``."""

    return str(user_id)


def task_chat_room(task_id: int) -> str:
    """Return the room name of the chat attached to ``task_id``."""

    return f"task_chat_{task_id}"


__all__ = [
    "EVENT_NEW_CHAT_MESSAGE",
    "EVENT_TASK_CHAT_STATUS_UPDATED",
    "EVENT_TASK_UPDATED",
    "EVENT_UNREAD_COUNT_UPDATED",
    "RealtimeChannel",
    "task_chat_room",
    "user_channel",
]
