from .auth import Token
from .chat_message import (
    ChatMessageCreate,
    ChatMessagePageRead,
    ChatMessageRead,
    ChatMessageSenderRead,
)
from .notification import (
    NotificationListResponse,
    NotificationRead,
    NotificationsUpdatedResponse,
    UnreadCountRead,
)
from .task import TaskAssigneeUpdate, TaskRead, TaskUpdate

__all__ = [
    "Token",
    "ChatMessageCreate",
    "ChatMessagePageRead",
    "ChatMessageRead",
    "ChatMessageSenderRead",
    "NotificationListResponse",
    "NotificationRead",
    "NotificationsUpdatedResponse",
    "UnreadCountRead",
    "TaskAssigneeUpdate",
    "TaskRead",
    "TaskUpdate",
]
