"""Endpoints for the chat attached to each task."""

from __future__ import annotations

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from app.application.errors import ApplicationError
from app.application.use_cases.chat import MAX_PAGE_SIZE, TaskChatService
from app.domain.entities import ChatMessage, User
from app.infrastructure.database import SessionLocal, get_db
from app.infrastructure.notifications import RealtimeEventPublisher, get_realtime_channel
from app.interfaces.api.dependencies import get_current_active_user
from app.interfaces.api.schemas import (
    ChatMessageCreate,
    ChatMessagePageRead,
    ChatMessageRead,
)

router = APIRouter(prefix="/tasks/{task_id}/messages", tags=["chat"])


def _to_read_model(message: ChatMessage) -> ChatMessageRead:
    return ChatMessageRead.model_validate(message)


def _service(
    db: Session,
    channel: RealtimeEventPublisher,
    background_tasks: BackgroundTasks | None = None,
) -> TaskChatService:
    return TaskChatService(
        db,
        channel,
        schedule=background_tasks.add_task if background_tasks is not None else None,
        session_factory=SessionLocal,
    )


@router.post("", response_model=ChatMessageRead, status_code=status.HTTP_201_CREATED)
def create_chat_message(
    task_id: int,
    message_in: ChatMessageCreate,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    channel: RealtimeEventPublisher = Depends(get_realtime_channel),
    current_user: User = Depends(get_current_active_user),
) -> ChatMessageRead:
    """Post a message on the chat of ``task_id`` and notify the task's team."""

    try:
        message = _service(db, channel, background_tasks).create_chat_message(
            task_id, current_user, message_in.content
        )
    except ApplicationError as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.detail) from exc
    return _to_read_model(message)


@router.get("", response_model=ChatMessagePageRead)
def list_chat_messages(
    task_id: int,
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=MAX_PAGE_SIZE),
    db: Session = Depends(get_db),
    channel: RealtimeEventPublisher = Depends(get_realtime_channel),
    current_user: User = Depends(get_current_active_user),
) -> ChatMessagePageRead:
    """Return one page of the chat of ``task_id``, newest message first."""

    try:
        result = _service(db, channel).list_chat_messages(
            task_id, current_user, page=page, page_size=limit
        )
    except ApplicationError as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.detail) from exc
    return ChatMessagePageRead(
        messages=[_to_read_model(message) for message in result.messages],
        total=result.total,
        page=result.page,
        limit=result.page_size,
        total_pages=result.total_pages,
    )
