"""Access rules for task chats and task data."""

from __future__ import annotations

import logging

from app.application.errors import ForbiddenError
from app.domain.entities import Project, Task, User

logger = logging.getLogger(__name__)


def can_access_task_chat(task: Task, project: Project, user: User) -> bool:
    """Return ``True`` when ``user`` may read and write the chat of ``task``.

    Administrators and coordinators always pass. Anyone else must be the task
    creator or assignee, or the lead, formulator or a collaborator of the
    project that owns the task.
    """

    if user.is_privileged():
        return True

    user_id = user.id
    if user_id is None:
        return False
    return (
        task.creator_id == user_id
        or task.assignee_id == user_id
        or project.lead_id == user_id
        or project.formulator_id == user_id
        or user_id in project.collaborator_ids
    )


def ensure_task_chat_access(task: Task, project: Project, user: User) -> None:
    """Raise :class:`ForbiddenError` unless ``user`` may use the chat of ``task``."""

    if not can_access_task_chat(task, project, user):
        logger.info("User %s denied access to the chat of task %s", user.id, task.id)
        raise ForbiddenError("You do not have permission to use the chat of this task.")


def can_assign_task(task: Task, project: Project, user: User) -> bool:
    """Return ``True`` when ``user`` may change the assignee of ``task``."""

    if user.is_privileged():
        return True
    return user.id is not None and user.id in (task.creator_id, project.lead_id)


def can_edit_task(task: Task, user: User) -> bool:
    """Return ``True`` when ``user`` may change any field of ``task``."""

    return user.is_privileged() or (user.id is not None and user.id == task.creator_id)


def can_change_task_status(task: Task, user: User) -> bool:
    """Return ``True`` when ``user`` may move ``task`` to another status.

    The assignee may do this even without the right to edit the task.
    """

    return can_edit_task(task, user) or (
        user.id is not None and user.id == task.assignee_id
    )


__all__ = [
    "can_access_task_chat",
    "can_assign_task",
    "can_change_task_status",
    "can_edit_task",
    "ensure_task_chat_access",
]
