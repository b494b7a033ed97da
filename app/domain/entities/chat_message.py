"""Domain entities for the per-task chat."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import datetime

CHAT_MESSAGE_MAX_LENGTH = 2000


@dataclass(frozen=True)
class ChatMessageSender:
    """Public identity of the user who sent a chat message."""

    id: int
    name: str
    email: str
    role: str


@dataclass
class ChatMessage:
    """HTML content posted on a task chat. Immutable once stored."""

    id: int | None
    task_id: int
    sender_id: int
    content: str
    created_at: datetime | None = None
    sender: ChatMessageSender | None = None


@dataclass
class ChatMessagePage:
    """A page of chat messages, newest first."""

    messages: list[ChatMessage] = field(default_factory=list)
    total: int = 0
    page: int = 1
    page_size: int = 20

    @property
    def total_pages(self) -> int:
        if self.total == 0:
            return 0
        return math.ceil(self.total / self.page_size)


__all__ = [
    "CHAT_MESSAGE_MAX_LENGTH",
    "ChatMessage",
    "ChatMessagePage",
    "ChatMessageSender",
]
