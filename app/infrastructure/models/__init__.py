"""ORM models used by the application infrastructure."""

from .user import RoleModel, UserModel
from .project import ProjectModel, project_collaborator_table
from .task import TaskModel
from .chat_message import ChatMessageModel
from .notification import NotificationModel

__all__ = [
    "RoleModel",
    "UserModel",
    "ProjectModel",
    "project_collaborator_table",
    "TaskModel",
    "ChatMessageModel",
    "NotificationModel",
]
