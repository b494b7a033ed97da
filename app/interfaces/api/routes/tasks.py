"""Task endpoints that trigger notifications."""

from __future__ import annotations

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException
from sqlalchemy.orm import Session

from app.application.errors import ApplicationError
from app.application.use_cases.tasks import assign_task, update_task
from app.domain.entities import User
from app.infrastructure.database import SessionLocal, get_db
from app.infrastructure.notifications import RealtimeEventPublisher, get_realtime_channel
from app.interfaces.api.dependencies import get_current_active_user
from app.interfaces.api.schemas import TaskAssigneeUpdate, TaskRead, TaskUpdate

router = APIRouter(prefix="/tasks", tags=["tasks"])


@router.patch("/{task_id}/assignee", response_model=TaskRead)
def update_task_assignee(
    task_id: int,
    payload: TaskAssigneeUpdate,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    channel: RealtimeEventPublisher = Depends(get_realtime_channel),
    current_user: User = Depends(get_current_active_user),
) -> TaskRead:
    """Assign the task to another user; the new assignee gets a notification."""

    try:
        task = assign_task(
            db,
            channel,
            task_id=task_id,
            assignee_id=payload.assignee_id,
            actor=current_user,
            schedule=background_tasks.add_task,
            session_factory=SessionLocal,
        )
    except ApplicationError as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.detail) from exc
    return TaskRead.model_validate(task)


@router.patch("/{task_id}", response_model=TaskRead)
def update_task_details(
    task_id: int,
    payload: TaskUpdate,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    channel: RealtimeEventPublisher = Depends(get_realtime_channel),
    current_user: User = Depends(get_current_active_user),
) -> TaskRead:
    """Change the title or status of a task; its creator and assignee are notified."""

    try:
        task = update_task(
            db,
            channel,
            task_id=task_id,
            actor=current_user,
            title=payload.title,
            status=payload.status,
            schedule=background_tasks.add_task,
            session_factory=SessionLocal,
        )
    except ApplicationError as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.detail) from exc
    return TaskRead.model_validate(task)
