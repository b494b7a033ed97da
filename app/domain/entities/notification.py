"""Domain entity representing a user notification."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class NotificationType(str, Enum):
    """Closed set of events a user can be notified about."""

    NEW_TASK_MESSAGE = "NEW_TASK_MESSAGE"
    TASK_MENTION = "TASK_MENTION"
    NEW_TASK_ASSIGNED = "NEW_TASK_ASSIGNED"
    TASK_STATUS_CHANGED = "TASK_STATUS_CHANGED"
    TASK_INFO_CHANGED = "TASK_INFO_CHANGED"
    TASK_COMPLETED = "TASK_COMPLETED"
    TASK_DUE_SOON = "TASK_DUE_SOON"


class NotificationCategory(str, Enum):
    """Inbox a notification is counted in."""

    SYSTEM = "SYSTEM"
    CHAT = "CHAT"

    @classmethod
    def parse(cls, value: str) -> "NotificationCategory":
        """Return the category named ``value`` ignoring case.

        Raises ``ValueError`` for anything other than ``SYSTEM`` or ``CHAT``.
        """

        normalized = value.strip().upper()
        try:
            return cls(normalized)
        except ValueError:
            msg = f"Invalid notification category '{value}'. Use SYSTEM or CHAT."
            raise ValueError(msg) from None


class NotificationResourceType(str, Enum):
    """Kind of resource a notification points at."""

    TASK = "TASK"
    PROJECT = "PROJECT"
    TASK_CHAT_MESSAGE = "TASK_CHAT_MESSAGE"


CHAT_NOTIFICATION_TYPES = frozenset(
    {NotificationType.NEW_TASK_MESSAGE, NotificationType.TASK_MENTION}
)


def category_for_type(notification_type: NotificationType) -> NotificationCategory:
    """Return the category of ``notification_type``: CHAT for chat kinds, SYSTEM otherwise."""

    if NotificationType(notification_type) in CHAT_NOTIFICATION_TYPES:
        return NotificationCategory.CHAT
    return NotificationCategory.SYSTEM


@dataclass
class Notification:
    """Information message delivered to a specific user.

    ``category`` is fixed when the notification is built and ``read`` only
    ever goes from ``False`` to ``True``.
    """

    id: int | None
    user_id: int
    type: NotificationType
    category: NotificationCategory
    message: str
    destination_url: str | None = None
    resource_id: int | None = None
    resource_type: NotificationResourceType | None = None
    read: bool = False
    created_at: datetime | None = None
    read_at: datetime | None = None

    @classmethod
    def build(
        cls,
        *,
        user_id: int,
        notification_type: NotificationType,
        message: str,
        destination_url: str | None = None,
        resource_id: int | None = None,
        resource_type: NotificationResourceType | None = None,
        created_at: datetime | None = None,
    ) -> "Notification":
        """Return a new unread notification with its category resolved from the type."""

        notification_type = NotificationType(notification_type)
        return cls(
            id=None,
            user_id=user_id,
            type=notification_type,
            category=category_for_type(notification_type),
            message=message,
            destination_url=destination_url,
            resource_id=resource_id,
            resource_type=resource_type,
            read=False,
            created_at=created_at,
            read_at=None,
        )


@dataclass(frozen=True)
class UnreadCounts:
    """Unread notifications of a user, split by category."""

    system: int = 0
    chat: int = 0

    @property
    def total(self) -> int:
        return self.system + self.chat

    def as_event_payload(self) -> dict[str, int]:
        """Payload of the ``unread_count_updated`` realtime event."""

        return {"systemCount": self.system, "chatCount": self.chat}


__all__ = [
    "CHAT_NOTIFICATION_TYPES",
    "Notification",
    "NotificationCategory",
    "NotificationResourceType",
    "NotificationType",
    "UnreadCounts",
    "category_for_type",
]
