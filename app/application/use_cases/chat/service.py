"""Task chat: posting and reading the messages attached to a task."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import asdict
from typing import Any

from sqlalchemy.orm import Session, sessionmaker

from app.application.access import ensure_task_chat_access
from app.application.errors import BadRequestError, NotFoundError, UnauthorizedError
from app.application.realtime import EVENT_NEW_CHAT_MESSAGE, RealtimeChannel, task_chat_room
from app.application.use_cases.notifications import run_task_chat_fanout
from app.domain.entities import (
    CHAT_MESSAGE_MAX_LENGTH,
    ChatMessage,
    ChatMessagePage,
    Project,
    Task,
    User,
)
from app.infrastructure.repositories import ChatMessageRepository, TaskRepository

logger = logging.getLogger(__name__)

MAX_PAGE_SIZE = 100

Scheduler = Callable[..., Any]


def run_inline(func: Callable[..., Any], *args: Any, **kwargs: Any) -> None:
    """Scheduler that runs the job immediately in the caller's thread."""

    func(*args, **kwargs)


def serialize_chat_message(message: ChatMessage) -> dict[str, Any]:
    """Return the JSON payload broadcast to a task chat room."""

    return {
        "id": message.id,
        "task_id": message.task_id,
        "sender_id": message.sender_id,
        "content": message.content,
        "created_at": message.created_at.isoformat() if message.created_at else None,
        "sender": asdict(message.sender) if message.sender else None,
    }


class TaskChatService:
    """Authorize, store and broadcast task chat messages.

    ``schedule`` receives ``(func, *args, **kwargs)`` and decides when the
    notification fan-out runs; FastAPI's ``BackgroundTasks.add_task`` defers it
    until the response has been sent, so room members get the broadcast before
    any unread count push. Jobs open their own sessions through
    ``session_factory``.
    """

    def __init__(
        self,
        session: Session,
        channel: RealtimeChannel,
        *,
        schedule: Scheduler | None = None,
        session_factory: Callable[[], Session] | None = None,
    ) -> None:
        self.session = session
        self._channel = channel
        self._schedule = schedule or run_inline
        self._session_factory = session_factory or sessionmaker(
            bind=session.get_bind(), autoflush=False
        )
        self._tasks = TaskRepository(session)
        self._messages = ChatMessageRepository(session)

    def create_chat_message(self, task_id: int, sender: User, content: str) -> ChatMessage:
        """Store ``content`` on the chat of ``task_id`` on behalf of ``sender``.

        Nothing is stored when the task is missing or the sender has no access.
        Notification and broadcast failures never fail the call.
        """

        _ensure_caller(sender)
        _ensure_task_id(task_id)
        content = _clean_content(content)
        self._load_accessible_task(task_id, sender)

        message = self._messages.create(
            ChatMessage(id=None, task_id=task_id, sender_id=sender.id, content=content)
        )
        logger.info("User %s posted message %s on task %s", sender.id, message.id, task_id)

        try:
            self._schedule(
                run_task_chat_fanout,
                self._session_factory,
                self._channel,
                task_id=task_id,
                message_id=message.id,
                sender_id=sender.id,
            )
        except Exception:
            logger.exception("Could not schedule the chat fan-out for message %s", message.id)

        try:
            self._channel.emit_to_room(
                task_chat_room(task_id),
                EVENT_NEW_CHAT_MESSAGE,
                serialize_chat_message(message),
            )
        except Exception:
            logger.warning(
                "Could not broadcast message %s to task %s", message.id, task_id, exc_info=True
            )
        return message

    def list_chat_messages(
        self,
        task_id: int,
        requester: User,
        *,
        page: int = 1,
        page_size: int = 20,
    ) -> ChatMessagePage:
        """Return one page of the chat of ``task_id``, newest message first."""

        _ensure_caller(requester)
        _ensure_task_id(task_id)
        if page < 1:
            raise BadRequestError("page must be greater than or equal to 1.")
        if not 1 <= page_size <= MAX_PAGE_SIZE:
            raise BadRequestError(f"limit must be between 1 and {MAX_PAGE_SIZE}.")
        self._load_accessible_task(task_id, requester)

        messages = self._messages.list_for_task(
            task_id, skip=(page - 1) * page_size, limit=page_size
        )
        return ChatMessagePage(
            messages=list(messages),
            total=self._messages.count_for_task(task_id),
            page=page,
            page_size=page_size,
        )

    def _load_accessible_task(self, task_id: int, user: User) -> tuple[Task, Project]:
        loaded = self._tasks.get_with_project(task_id)
        if loaded is None:
            raise NotFoundError(f"Task {task_id} not found.")
        task, project = loaded
        ensure_task_chat_access(task, project, user)
        return task, project


def _ensure_caller(user: User | None) -> None:
    if user is None or user.id is None:
        raise UnauthorizedError()


def _ensure_task_id(task_id: int) -> None:
    if not isinstance(task_id, int) or isinstance(task_id, bool) or task_id < 1:
        raise BadRequestError("Invalid task id.")


def _clean_content(content: str) -> str:
    if not isinstance(content, str) or not content.strip():
        raise BadRequestError("Message content cannot be empty.")
    if len(content.strip()) > CHAT_MESSAGE_MAX_LENGTH:
        raise BadRequestError(
            f"Message content cannot exceed {CHAT_MESSAGE_MAX_LENGTH} characters."
        )
    return content


__all__ = [
    "MAX_PAGE_SIZE",
    "TaskChatService",
    "run_inline",
    "serialize_chat_message",
]
