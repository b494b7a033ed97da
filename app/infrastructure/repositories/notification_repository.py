"""Persistence helpers for notification entities."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from app.domain.entities import (
    Notification,
    NotificationCategory,
    NotificationResourceType,
    NotificationType,
    UnreadCounts,
)
from app.infrastructure.models import NotificationModel
from app.utils import (
    ensure_app_naive_datetime,
    ensure_app_timezone,
    now_in_app_timezone,
)


class NotificationRepository:
    """Provide create, query and read-marking operations for :class:`Notification`."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def create(self, notification: Notification) -> Notification:
        model = NotificationModel()
        self._apply_entity_to_model(model, notification)
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    def get_for_user(self, notification_id: int, *, user_id: int) -> Notification | None:
        model = self._get_owned_model(notification_id, user_id=user_id)
        return self._to_entity(model) if model else None

    def list_for_user(
        self,
        user_id: int,
        *,
        only_unread: bool = False,
        category: NotificationCategory | None = None,
        limit: int | None = 50,
    ) -> Sequence[Notification]:
        query = self.session.query(NotificationModel).filter(
            NotificationModel.user_id == user_id
        )
        if only_unread:
            query = query.filter(NotificationModel.read.is_(False))
        if category is not None:
            query = query.filter(
                NotificationModel.category == NotificationCategory(category).value
            )
        query = query.order_by(
            NotificationModel.created_at.desc(), NotificationModel.id.desc()
        )
        if limit is not None:
            query = query.limit(limit)
        return [self._to_entity(model) for model in query.all()]

    def mark_as_read(self, notification_id: int, *, user_id: int) -> int:
        """Mark one owned notification as read.

        Returns the number of rows that changed: ``0`` when the notification is
        missing, belongs to another user or was already read, so ``read_at``
        keeps the time of the first read.
        """

        query = self.session.query(NotificationModel).filter(
            NotificationModel.id == notification_id,
            NotificationModel.user_id == user_id,
            NotificationModel.read.is_(False),
        )
        return self._mark_query_as_read(query)

    def mark_all_as_read(
        self, user_id: int, *, category: NotificationCategory | None = None
    ) -> int:
        query = self.session.query(NotificationModel).filter(
            NotificationModel.user_id == user_id,
            NotificationModel.read.is_(False),
        )
        if category is not None:
            query = query.filter(
                NotificationModel.category == NotificationCategory(category).value
            )
        return self._mark_query_as_read(query)

    def mark_as_read_by_destination(
        self,
        user_id: int,
        *,
        notification_types: Iterable[NotificationType],
        path_fragment: str,
    ) -> int:
        """Mark unread notifications of ``notification_types`` pointing at ``path_fragment``.

        The fragment must match whole path segments, so ``/tasks/4`` matches
        ``/projects/1/tasks/4`` and ``/projects/1/tasks/4/files`` but never
        ``/projects/1/tasks/42``.
        """

        type_values = [NotificationType(value).value for value in notification_types]
        if not type_values:
            return 0
        url = NotificationModel.destination_url
        query = self.session.query(NotificationModel).filter(
            NotificationModel.user_id == user_id,
            NotificationModel.read.is_(False),
            NotificationModel.type.in_(type_values),
            or_(
                url.like(f"%{path_fragment}"),
                url.like(f"%{path_fragment}/%"),
                url.like(f"%{path_fragment}?%"),
                url.like(f"%{path_fragment}#%"),
            ),
        )
        return self._mark_query_as_read(query)

    def count_unread_by_category(self, user_id: int) -> UnreadCounts:
        rows = (
            self.session.query(NotificationModel.category, func.count(NotificationModel.id))
            .filter(
                NotificationModel.user_id == user_id,
                NotificationModel.read.is_(False),
            )
            .group_by(NotificationModel.category)
            .all()
        )
        counts = {category: total for category, total in rows}
        return UnreadCounts(
            system=int(counts.get(NotificationCategory.SYSTEM.value, 0)),
            chat=int(counts.get(NotificationCategory.CHAT.value, 0)),
        )

    def _mark_query_as_read(self, query) -> int:
        updated = query.update(
            {
                NotificationModel.read: True,
                NotificationModel.read_at: ensure_app_naive_datetime(
                    now_in_app_timezone()
                ),
            },
            synchronize_session=False,
        )
        self.session.commit()
        return int(updated or 0)

    def _get_owned_model(
        self, notification_id: int, *, user_id: int
    ) -> NotificationModel | None:
        return (
            self.session.query(NotificationModel)
            .filter(
                NotificationModel.id == notification_id,
                NotificationModel.user_id == user_id,
            )
            .first()
        )

    @staticmethod
    def _apply_entity_to_model(
        model: NotificationModel, notification: Notification
    ) -> None:
        model.user_id = notification.user_id
        model.type = NotificationType(notification.type).value
        model.category = NotificationCategory(notification.category).value
        model.message = notification.message
        model.destination_url = notification.destination_url
        model.resource_id = notification.resource_id
        model.resource_type = (
            NotificationResourceType(notification.resource_type).value
            if notification.resource_type
            else None
        )
        model.read = bool(notification.read)
        model.created_at = ensure_app_naive_datetime(
            notification.created_at or now_in_app_timezone()
        )
        model.read_at = ensure_app_naive_datetime(notification.read_at)

    @staticmethod
    def _to_entity(model: NotificationModel) -> Notification:
        return Notification(
            id=model.id,
            user_id=model.user_id,
            type=NotificationType(model.type),
            category=NotificationCategory(model.category),
            message=model.message,
            destination_url=model.destination_url,
            resource_id=model.resource_id,
            resource_type=(
                NotificationResourceType(model.resource_type)
                if model.resource_type
                else None
            ),
            read=bool(model.read),
            created_at=ensure_app_timezone(model.created_at),
            read_at=ensure_app_timezone(model.read_at),
        )


__all__ = ["NotificationRepository"]
