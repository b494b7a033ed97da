"""Aggregate application use cases."""

from .chat import TaskChatService
from .notifications import NotificationFanout, NotificationService
from .tasks import assign_task

__all__ = [
    "NotificationFanout",
    "NotificationService",
    "TaskChatService",
    "assign_task",
]
