"""Schemas for the task chat endpoints."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from app.domain.entities import CHAT_MESSAGE_MAX_LENGTH


class ChatMessageCreate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    content: str = Field(
        ...,
        min_length=1,
        description=(
            "HTML produced by the rich text editor, at most "
            f"{CHAT_MESSAGE_MAX_LENGTH} characters once trimmed"
        ),
    )


class ChatMessageSenderRead(BaseModel):
    """Public identity of the sender. Never includes credentials."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: EmailStr
    role: str


class ChatMessageRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    task_id: int
    sender_id: int
    content: str
    created_at: datetime
    sender: ChatMessageSenderRead | None = None


class ChatMessagePageRead(BaseModel):
    messages: list[ChatMessageRead]
    total: int
    page: int
    limit: int
    total_pages: int


__all__ = [
    "ChatMessageCreate",
    "ChatMessagePageRead",
    "ChatMessageRead",
    "ChatMessageSenderRead",
]
