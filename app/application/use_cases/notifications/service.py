"""Notification store: creation, listing and read-state transitions."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from sqlalchemy.orm import Session

from app.application.errors import BadRequestError, NotFoundError
from app.application.realtime import (
    EVENT_TASK_CHAT_STATUS_UPDATED,
    EVENT_UNREAD_COUNT_UPDATED,
    RealtimeChannel,
)
from app.config import get_settings
from app.domain.entities import (
    CHAT_NOTIFICATION_TYPES,
    Notification,
    NotificationCategory,
    NotificationResourceType,
    NotificationType,
    UnreadCounts,
    task_path_fragment,
)
from app.infrastructure.repositories import NotificationRepository
from app.utils import now_in_app_timezone

logger = logging.getLogger(__name__)


class NotificationService:
    """Persist notifications and keep each user's unread counters in sync.

    Every operation that changes the unread set of a user is followed by a
    fresh count query whose result is pushed to that user's channel as an
    ``unread_count_updated`` event.
    """

    def __init__(
        self,
        session: Session,
        channel: RealtimeChannel,
        *,
        page_size: int | None = None,
    ) -> None:
        self.session = session
        self._channel = channel
        self._repository = NotificationRepository(session)
        self._page_size = page_size or get_settings().notification_page_size

    def create(
        self,
        *,
        user_id: int,
        notification_type: NotificationType,
        message: str,
        destination_url: str | None = None,
        resource_id: int | None = None,
        resource_type: NotificationResourceType | None = None,
    ) -> Notification:
        notification = Notification.build(
            user_id=user_id,
            notification_type=notification_type,
            message=message,
            destination_url=destination_url,
            resource_id=resource_id,
            resource_type=resource_type,
            created_at=now_in_app_timezone(),
        )
        saved = self._repository.create(notification)
        logger.info(
            "Notification %s (%s) created for user %s", saved.id, saved.type.value, user_id
        )
        self.publish_unread_counts(user_id)
        return saved

    def list_for_user(
        self,
        user_id: int,
        *,
        only_unread: bool = False,
        category: NotificationCategory | None = None,
    ) -> Sequence[Notification]:
        """Return the newest notifications of ``user_id``, at most one page."""

        return self._repository.list_for_user(
            user_id,
            only_unread=only_unread,
            category=category,
            limit=self._page_size,
        )

    def mark_as_read(self, notification_id: int, user_id: int) -> Notification:
        """Mark an owned notification as read; repeated calls are no-ops."""

        _ensure_identifier(notification_id, "notification")
        current = self._repository.get_for_user(notification_id, user_id=user_id)
        if current is None:
            logger.warning(
                "User %s tried to mark notification %s as read: not found or not owned",
                user_id,
                notification_id,
            )
            raise NotFoundError("Notification not found.")
        if current.read:
            return current

        if self._repository.mark_as_read(notification_id, user_id=user_id):
            self.publish_unread_counts(user_id)
        updated = self._repository.get_for_user(notification_id, user_id=user_id)
        if updated is None:  # pragma: no cover - deleted between both queries
            raise NotFoundError("Notification not found.")
        return updated

    def mark_all_as_read(
        self, user_id: int, *, category: NotificationCategory | None = None
    ) -> int:
        """Mark every unread notification (optionally of one category) as read."""

        updated = self._repository.mark_all_as_read(user_id, category=category)
        if updated:
            self.publish_unread_counts(user_id)
        return updated

    def mark_task_chat_as_read(self, user_id: int, task_id: int) -> int:
        """Clear the chat notifications of ``task_id`` once the user opened its chat.

        The user's other sessions are always told that the chat has no unread
        messages left, even when no notification changed.
        """

        _ensure_identifier(task_id, "task")
        updated = self._repository.mark_as_read_by_destination(
            user_id,
            notification_types=CHAT_NOTIFICATION_TYPES,
            path_fragment=task_path_fragment(task_id),
        )
        if updated:
            self.publish_unread_counts(user_id)
        try:
            self._channel.emit_to_user(
                user_id,
                EVENT_TASK_CHAT_STATUS_UPDATED,
                {"task_id": task_id, "has_unread_messages": False},
            )
        except Exception:
            logger.warning(
                "Could not publish chat status of task %s for user %s",
                task_id,
                user_id,
                exc_info=True,
            )
        return updated

    def unread_counts(self, user_id: int) -> UnreadCounts:
        return self._repository.count_unread_by_category(user_id)

    def publish_unread_counts(self, user_id: int) -> None:
        """Push the current unread counts of ``user_id`` to its channel.

        Failures are logged; a notification that was stored stays stored.
        """

        try:
            counts = self.unread_counts(user_id)
            self._channel.emit_to_user(
                user_id, EVENT_UNREAD_COUNT_UPDATED, counts.as_event_payload()
            )
        except Exception:
            logger.warning(
                "Could not publish unread counts for user %s", user_id, exc_info=True
            )


def _ensure_identifier(value: int, label: str) -> None:
    if not isinstance(value, int) or isinstance(value, bool) or value < 1:
        raise BadRequestError(f"Invalid {label} id.")


__all__ = ["NotificationService"]
