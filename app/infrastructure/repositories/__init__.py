"""Repository implementations for infrastructure layer."""

from .chat_message_repository import ChatMessageRepository
from .notification_repository import NotificationRepository
from .task_repository import TaskRepository
from .user_repository import UserRepository

__all__ = [
    "ChatMessageRepository",
    "NotificationRepository",
    "TaskRepository",
    "UserRepository",
]
