"""Use case for editing the title or status of a task."""

from __future__ import annotations

import logging
from collections.abc import Callable

from sqlalchemy.orm import Session, sessionmaker

from app.application.access import can_change_task_status, can_edit_task
from app.application.errors import BadRequestError, ForbiddenError, NotFoundError
from app.application.realtime import RealtimeChannel
from app.application.use_cases.chat import run_inline
from app.application.use_cases.notifications import run_task_update_fanout
from app.domain.entities import NotificationType, Task, TaskStatus, User
from app.infrastructure.repositories import TaskRepository

logger = logging.getLogger(__name__)

TASK_TITLE_MAX_LENGTH = 200


def update_task(
    session: Session,
    channel: RealtimeChannel,
    *,
    task_id: int,
    actor: User,
    title: str | None = None,
    status: TaskStatus | None = None,
    schedule: Callable[..., object] | None = None,
    session_factory: Callable[[], Session] | None = None,
) -> Task:
    """Apply the given changes to ``task_id`` and notify its creator and assignee.

    A move to COMPLETED is reported as ``TASK_COMPLETED``, any other status
    change as ``TASK_STATUS_CHANGED`` and a title-only change as
    ``TASK_INFO_CHANGED``. Nothing is notified when no field actually changes.
    """

    if task_id < 1:
        raise BadRequestError("Invalid identifier.")
    if title is not None:
        title = title.strip()
        if not title or len(title) > TASK_TITLE_MAX_LENGTH:
            raise BadRequestError(
                f"Task title must have between 1 and {TASK_TITLE_MAX_LENGTH} characters."
            )
    if status is not None:
        status = TaskStatus(status)

    repository = TaskRepository(session)
    loaded = repository.get_with_project(task_id)
    if loaded is None:
        raise NotFoundError(f"Task {task_id} not found.")
    task, _ = loaded

    if not can_edit_task(task, actor):
        if title is not None or not can_change_task_status(task, actor):
            logger.info("User %s denied editing task %s", actor.id, task_id)
            raise ForbiddenError("You do not have permission to edit this task.")

    title_changed = title is not None and title != task.title
    status_changed = status is not None and status is not task.status
    if not title_changed and not status_changed:
        return task

    updated = repository.update_details(
        task_id,
        title=title if title_changed else None,
        status=status if status_changed else None,
    )
    logger.info(
        "Task %s updated by user %s (title changed: %s, status: %s -> %s)",
        task_id,
        actor.id,
        title_changed,
        task.status.value,
        updated.status.value,
    )

    if status_changed and updated.status is TaskStatus.COMPLETED:
        notification_type = NotificationType.TASK_COMPLETED
    elif status_changed:
        notification_type = NotificationType.TASK_STATUS_CHANGED
    else:
        notification_type = NotificationType.TASK_INFO_CHANGED

    factory = session_factory or sessionmaker(bind=session.get_bind(), autoflush=False)
    try:
        (schedule or run_inline)(
            run_task_update_fanout,
            factory,
            channel,
            task_id=task_id,
            actor_id=actor.id,
            notification_type=notification_type,
        )
    except Exception:
        logger.exception("Could not schedule the update fan-out for task %s", task_id)
    return updated
