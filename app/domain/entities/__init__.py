"""Domain entities exposed by the application."""

from .chat_message import (
    CHAT_MESSAGE_MAX_LENGTH,
    ChatMessage,
    ChatMessagePage,
    ChatMessageSender,
)
from .notification import (
    CHAT_NOTIFICATION_TYPES,
    Notification,
    NotificationCategory,
    NotificationResourceType,
    NotificationType,
    UnreadCounts,
    category_for_type,
)
from .project import Project
from .role import (
    PRIVILEGED_ROLE_ALIASES,
    ROLE_ADMIN,
    ROLE_COORDINATOR,
    ROLE_USER,
    Role,
)
from .task import Task, TaskStatus, task_path_fragment
from .user import User

__all__ = [
    "CHAT_MESSAGE_MAX_LENGTH",
    "ChatMessage",
    "ChatMessagePage",
    "ChatMessageSender",
    "CHAT_NOTIFICATION_TYPES",
    "Notification",
    "NotificationCategory",
    "NotificationResourceType",
    "NotificationType",
    "UnreadCounts",
    "category_for_type",
    "Project",
    "PRIVILEGED_ROLE_ALIASES",
    "ROLE_ADMIN",
    "ROLE_COORDINATOR",
    "ROLE_USER",
    "Role",
    "Task",
    "TaskStatus",
    "task_path_fragment",
    "User",
]
