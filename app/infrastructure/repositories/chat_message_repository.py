"""Persistence helpers for task chat messages."""

from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy.orm import Session, joinedload

from app.domain.entities import ChatMessage, ChatMessageSender
from app.infrastructure.models import ChatMessageModel, UserModel
from app.utils import ensure_app_naive_datetime, ensure_app_timezone, now_in_app_timezone


class ChatMessageRepository:
    """Create and page through :class:`ChatMessage` objects."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def create(self, message: ChatMessage) -> ChatMessage:
        model = ChatMessageModel(
            task_id=message.task_id,
            sender_id=message.sender_id,
            content=message.content,
            created_at=ensure_app_naive_datetime(
                message.created_at or now_in_app_timezone()
            ),
        )
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    def get(self, message_id: int) -> ChatMessage | None:
        model = (
            self.session.query(ChatMessageModel)
            .options(joinedload(ChatMessageModel.sender).joinedload(UserModel.role))
            .filter(ChatMessageModel.id == message_id)
            .first()
        )
        return self._to_entity(model) if model else None

    def list_for_task(
        self, task_id: int, *, skip: int = 0, limit: int = 20
    ) -> Sequence[ChatMessage]:
        query = (
            self.session.query(ChatMessageModel)
            .options(joinedload(ChatMessageModel.sender).joinedload(UserModel.role))
            .filter(ChatMessageModel.task_id == task_id)
            .order_by(ChatMessageModel.created_at.desc(), ChatMessageModel.id.desc())
            .offset(skip)
            .limit(limit)
        )
        return [self._to_entity(model) for model in query.all()]

    def count_for_task(self, task_id: int) -> int:
        return (
            self.session.query(ChatMessageModel)
            .filter(ChatMessageModel.task_id == task_id)
            .count()
        )

    @staticmethod
    def _to_entity(model: ChatMessageModel) -> ChatMessage:
        sender = None
        if model.sender is not None:
            sender = ChatMessageSender(
                id=model.sender.id,
                name=model.sender.name,
                email=model.sender.email,
                role=model.sender.role.alias if model.sender.role else "",
            )
        return ChatMessage(
            id=model.id,
            task_id=model.task_id,
            sender_id=model.sender_id,
            content=model.content,
            created_at=ensure_app_timezone(model.created_at),
            sender=sender,
        )


__all__ = ["ChatMessageRepository"]
