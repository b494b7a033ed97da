"""Pydantic models describing notification payloads."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from app.domain.entities import (
    NotificationCategory,
    NotificationResourceType,
    NotificationType,
)


class NotificationRead(BaseModel):
    """Representation of a notification delivered to the client."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    type: NotificationType
    category: NotificationCategory
    message: str
    destination_url: str | None = None
    resource_id: int | None = None
    resource_type: NotificationResourceType | None = None
    read: bool
    created_at: datetime
    read_at: datetime | None = None


class NotificationListResponse(BaseModel):
    notifications: list[NotificationRead] = Field(default_factory=list)
    unread_count: int = Field(0, description="Unread notifications in the returned list")


class NotificationsUpdatedResponse(BaseModel):
    updated_count: int


class UnreadCountRead(BaseModel):
    system_count: int
    chat_count: int


__all__ = [
    "NotificationListResponse",
    "NotificationRead",
    "NotificationsUpdatedResponse",
    "UnreadCountRead",
]
