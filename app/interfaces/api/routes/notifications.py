"""Endpoints to list notifications and manage their read state."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from app.application.errors import ApplicationError
from app.application.use_cases.notifications import NotificationService
from app.domain.entities import Notification, NotificationCategory, User
from app.infrastructure.database import get_db
from app.infrastructure.notifications import RealtimeEventPublisher, get_realtime_channel
from app.interfaces.api.dependencies import get_current_active_user
from app.interfaces.api.schemas import (
    NotificationListResponse,
    NotificationRead,
    NotificationsUpdatedResponse,
    UnreadCountRead,
)

router = APIRouter(prefix="/notifications", tags=["notifications"])


def _notification_to_schema(notification: Notification) -> NotificationRead:
    return NotificationRead.model_validate(notification)


def _parse_category(value: str | None) -> NotificationCategory | None:
    if value is None or not value.strip():
        return None
    try:
        return NotificationCategory.parse(value)
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)
        ) from exc


def get_notification_service(
    db: Session = Depends(get_db),
    channel: RealtimeEventPublisher = Depends(get_realtime_channel),
) -> NotificationService:
    return NotificationService(db, channel)


@router.get("/", response_model=NotificationListResponse)
def list_notifications(
    only_unread: bool = Query(False, alias="onlyUnread"),
    category: str | None = Query(None, description="SYSTEM or CHAT, case-insensitive"),
    service: NotificationService = Depends(get_notification_service),
    current_user: User = Depends(get_current_active_user),
) -> NotificationListResponse:
    """Return the most recent notifications for the authenticated user."""

    notifications = service.list_for_user(
        current_user.id,
        only_unread=only_unread,
        category=_parse_category(category),
    )
    return NotificationListResponse(
        notifications=[_notification_to_schema(item) for item in notifications],
        unread_count=sum(1 for item in notifications if not item.read),
    )


@router.get("/unread-count", response_model=UnreadCountRead)
def read_unread_count(
    service: NotificationService = Depends(get_notification_service),
    current_user: User = Depends(get_current_active_user),
) -> UnreadCountRead:
    """Return the unread counters shown in the navigation bar."""

    counts = service.unread_counts(current_user.id)
    return UnreadCountRead(system_count=counts.system, chat_count=counts.chat)


@router.put("/read-all", response_model=NotificationsUpdatedResponse)
def mark_all_notifications_as_read(
    category: str | None = Query(None, description="SYSTEM or CHAT, case-insensitive"),
    service: NotificationService = Depends(get_notification_service),
    current_user: User = Depends(get_current_active_user),
) -> NotificationsUpdatedResponse:
    """Mark every unread notification of the user (optionally of one category) as read."""

    updated = service.mark_all_as_read(current_user.id, category=_parse_category(category))
    return NotificationsUpdatedResponse(updated_count=updated)


@router.put("/tasks/{task_id}/read", response_model=NotificationsUpdatedResponse)
def mark_task_chat_notifications_as_read(
    task_id: int,
    service: NotificationService = Depends(get_notification_service),
    current_user: User = Depends(get_current_active_user),
) -> NotificationsUpdatedResponse:
    """Clear the chat notifications of a task once its chat has been viewed."""

    try:
        updated = service.mark_task_chat_as_read(current_user.id, task_id)
    except ApplicationError as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.detail) from exc
    return NotificationsUpdatedResponse(updated_count=updated)


@router.put("/{notification_id}/read", response_model=NotificationRead)
def mark_notification_as_read(
    notification_id: int,
    service: NotificationService = Depends(get_notification_service),
    current_user: User = Depends(get_current_active_user),
) -> NotificationRead:
    """Mark one notification as read. Calling it again is harmless."""

    try:
        notification = service.mark_as_read(notification_id, current_user.id)
    except ApplicationError as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.detail) from exc
    return _notification_to_schema(notification)
