"""Use case for changing the assignee of a task."""

from __future__ import annotations

import logging
from collections.abc import Callable

from sqlalchemy.orm import Session, sessionmaker

from app.application.access import can_assign_task
from app.application.errors import BadRequestError, ForbiddenError, NotFoundError
from app.application.realtime import RealtimeChannel
from app.application.use_cases.chat import run_inline
from app.application.use_cases.notifications import run_task_assignment_fanout
from app.domain.entities import Task, User
from app.infrastructure.repositories import TaskRepository, UserRepository

logger = logging.getLogger(__name__)


def assign_task(
    session: Session,
    channel: RealtimeChannel,
    *,
    task_id: int,
    assignee_id: int | None,
    actor: User,
    schedule: Callable[..., object] | None = None,
    session_factory: Callable[[], Session] | None = None,
) -> Task:
    """Assign ``task_id`` to ``assignee_id`` (``None`` clears it) and notify the assignee."""

    if task_id < 1 or (assignee_id is not None and assignee_id < 1):
        raise BadRequestError("Invalid identifier.")

    repository = TaskRepository(session)
    loaded = repository.get_with_project(task_id)
    if loaded is None:
        raise NotFoundError(f"Task {task_id} not found.")
    task, project = loaded
    if not can_assign_task(task, project, actor):
        raise ForbiddenError("You do not have permission to assign this task.")

    if assignee_id is not None:
        assignee = UserRepository(session).get(assignee_id)
        if assignee is None or not assignee.is_active:
            raise NotFoundError(f"User {assignee_id} not found.")

    previous_assignee_id = task.assignee_id
    updated = repository.update_assignee(task_id, assignee_id)
    logger.info(
        "Task %s reassigned from %s to %s by user %s",
        task_id,
        previous_assignee_id,
        assignee_id,
        actor.id,
    )

    if assignee_id is not None and assignee_id != previous_assignee_id and assignee_id != actor.id:
        factory = session_factory or sessionmaker(bind=session.get_bind(), autoflush=False)
        try:
            (schedule or run_inline)(
                run_task_assignment_fanout,
                factory,
                channel,
                task_id=task_id,
                actor_id=actor.id,
            )
        except Exception:
            logger.exception("Could not schedule the assignment fan-out for task %s", task_id)
    return updated
