"""Fan-out of task events into per-user notifications.

The pure helpers decide who hears about an event; :class:`NotificationFanout`
stores one notification per recipient. The ``run_*`` jobs are what request
handlers schedule once their own transaction has committed: they reload the
event's state by id in a fresh session and never raise.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from enum import Enum

from sqlalchemy.orm import Session

from app.application.realtime import EVENT_TASK_UPDATED, RealtimeChannel
from app.domain.entities import (
    ChatMessage,
    Notification,
    NotificationResourceType,
    NotificationType,
    Project,
    Task,
    User,
)
from app.infrastructure.repositories import (
    ChatMessageRepository,
    TaskRepository,
    UserRepository,
)

from .service import NotificationService

logger = logging.getLogger(__name__)

SessionFactory = Callable[[], Session]


class Relation(str, Enum):
    """Structural link between a user and a task."""

    CREATOR = "creator"
    ASSIGNEE = "assignee"
    LEAD = "lead"
    FORMULATOR = "formulator"
    COLLABORATOR = "collaborator"


def interested_parties(task: Task, project: Project) -> dict[int, set[Relation]]:
    """Return every user related to ``task`` with the relations they hold."""

    parties: dict[int, set[Relation]] = {}

    def add(user_id: int | None, relation: Relation) -> None:
        if user_id:
            parties.setdefault(user_id, set()).add(relation)

    add(task.creator_id, Relation.CREATOR)
    add(task.assignee_id, Relation.ASSIGNEE)
    add(project.lead_id, Relation.LEAD)
    add(project.formulator_id, Relation.FORMULATOR)
    for collaborator_id in project.collaborator_ids:
        add(collaborator_id, Relation.COLLABORATOR)
    return parties


def classify_relevance(user: User, task: Task, project: Project) -> bool:
    """Return ``True`` when an interested ``user`` should be notified about ``task``.

    Plain users are always relevant. Administrators and coordinators see every
    task anyway, so they are only notified when they are its creator, its
    assignee or the project lead.
    """

    if not user.is_privileged():
        return True
    return user.id is not None and user.id in (
        task.creator_id,
        task.assignee_id,
        project.lead_id,
    )


def chat_message_notification_text(sender: User, task: Task, project: Project) -> str:
    return (
        f"{sender.display_name} sent a message on task '{task.title}' "
        f"of project '{project.name}'."
    )


def task_assigned_notification_text(actor: User, task: Task, project: Project) -> str:
    return (
        f"{actor.display_name} assigned you the task '{task.title}' "
        f"of project '{project.name}'."
    )


def task_updated_notification_text(
    actor: User, task: Task, project: Project, notification_type: NotificationType
) -> str:
    subject = f"the task '{task.title}' of project '{project.name}'"
    if notification_type is NotificationType.TASK_COMPLETED:
        return f"{actor.display_name} completed {subject}."
    if notification_type is NotificationType.TASK_STATUS_CHANGED:
        return f"{actor.display_name} moved {subject} to {task.status.label}."
    return f"{actor.display_name} updated {subject}."


class NotificationFanout:
    """Create the notifications triggered by task events."""

    def __init__(self, session: Session, channel: RealtimeChannel) -> None:
        self.session = session
        self._channel = channel
        self._notifications = NotificationService(session, channel)
        self._users = UserRepository(session)

    def notify_task_chat_message(
        self,
        *,
        task: Task,
        project: Project,
        sender: User,
        message: ChatMessage,
    ) -> list[Notification]:
        """Notify the relevant parties of ``task`` about a new chat ``message``.

        The sender is never notified. Recipients are processed independently:
        a failure for one of them is logged and the others still get theirs.
        """

        candidate_ids = set(interested_parties(task, project))
        candidate_ids.discard(sender.id)
        if not candidate_ids:
            return []

        recipients = self._users.get_map_by_ids(candidate_ids)
        text = chat_message_notification_text(sender, task, project)
        created: list[Notification] = []
        for user_id in sorted(candidate_ids):
            user = recipients.get(user_id)
            if user is None or not user.is_active:
                logger.debug("Skipping unavailable user %s for task %s", user_id, task.id)
                continue
            if not classify_relevance(user, task, project):
                continue
            notification = self._create_safely(
                user_id=user_id,
                notification_type=NotificationType.NEW_TASK_MESSAGE,
                message=text,
                destination_url=task.path,
                resource_id=message.id,
                resource_type=NotificationResourceType.TASK_CHAT_MESSAGE,
            )
            if notification is not None:
                created.append(notification)
        return created

    def notify_task_assigned(
        self, *, task: Task, project: Project, actor: User
    ) -> Notification | None:
        """Notify the assignee of ``task`` unless they assigned it to themselves."""

        assignee_id = task.assignee_id
        if not assignee_id or assignee_id == actor.id:
            return None
        assignee = self._users.get(assignee_id)
        if assignee is None or not assignee.is_active:
            return None
        return self._create_safely(
            user_id=assignee_id,
            notification_type=NotificationType.NEW_TASK_ASSIGNED,
            message=task_assigned_notification_text(actor, task, project),
            destination_url=task.path,
            resource_id=task.id,
            resource_type=NotificationResourceType.TASK,
        )

    def notify_task_updated(
        self,
        *,
        task: Task,
        project: Project,
        actor: User,
        notification_type: NotificationType,
    ) -> list[Notification]:
        """Tell the creator and assignee of ``task`` that ``actor`` changed it.

        Each recipient also gets a ``task_updated`` event so open task views
        can refresh without waiting for the notification list.
        """

        candidate_ids = {task.creator_id, task.assignee_id} - {None, actor.id}
        if not candidate_ids:
            return []

        recipients = self._users.get_map_by_ids(candidate_ids)
        text = task_updated_notification_text(actor, task, project, notification_type)
        created: list[Notification] = []
        for user_id in sorted(candidate_ids):
            user = recipients.get(user_id)
            if user is None or not user.is_active:
                logger.debug("Skipping unavailable user %s for task %s", user_id, task.id)
                continue
            notification = self._create_safely(
                user_id=user_id,
                notification_type=notification_type,
                message=text,
                destination_url=task.path,
                resource_id=task.id,
                resource_type=NotificationResourceType.TASK,
            )
            if notification is None:
                continue
            created.append(notification)
            try:
                self._channel.emit_to_user(
                    user_id,
                    EVENT_TASK_UPDATED,
                    {
                        "task_id": task.id,
                        "title": task.title,
                        "status": task.status.value,
                        "change": notification_type.value,
                    },
                )
            except Exception:
                logger.warning(
                    "Could not publish update of task %s to user %s",
                    task.id,
                    user_id,
                    exc_info=True,
                )
        return created

    def _create_safely(self, *, user_id: int, **fields) -> Notification | None:
        try:
            return self._notifications.create(user_id=user_id, **fields)
        except Exception:
            self.session.rollback()
            logger.exception(
                "Could not create %s notification for user %s",
                fields.get("notification_type"),
                user_id,
            )
            return None


def run_task_chat_fanout(
    session_factory: SessionFactory,
    channel: RealtimeChannel,
    *,
    task_id: int,
    message_id: int,
    sender_id: int,
) -> None:
    """Background job notifying the parties of a task about a stored chat message."""

    try:
        session = session_factory()
    except Exception:
        logger.exception("Chat fan-out could not open a session for task %s", task_id)
        return
    try:
        loaded = TaskRepository(session).get_with_project(task_id)
        message = ChatMessageRepository(session).get(message_id)
        sender = UserRepository(session).get(sender_id)
        if loaded is None or message is None or sender is None:
            logger.warning(
                "Chat fan-out skipped: task %s, message %s or sender %s no longer exists",
                task_id,
                message_id,
                sender_id,
            )
            return
        task, project = loaded
        NotificationFanout(session, channel).notify_task_chat_message(
            task=task, project=project, sender=sender, message=message
        )
    except Exception:
        logger.exception("Chat fan-out failed for message %s on task %s", message_id, task_id)
    finally:
        session.close()


def run_task_assignment_fanout(
    session_factory: SessionFactory,
    channel: RealtimeChannel,
    *,
    task_id: int,
    actor_id: int,
) -> None:
    """Background job notifying the current assignee of ``task_id``."""

    try:
        session = session_factory()
    except Exception:
        logger.exception("Assignment fan-out could not open a session for task %s", task_id)
        return
    try:
        loaded = TaskRepository(session).get_with_project(task_id)
        actor = UserRepository(session).get(actor_id)
        if loaded is None or actor is None:
            logger.warning(
                "Assignment fan-out skipped: task %s or actor %s no longer exists",
                task_id,
                actor_id,
            )
            return
        task, project = loaded
        NotificationFanout(session, channel).notify_task_assigned(
            task=task, project=project, actor=actor
        )
    except Exception:
        logger.exception("Assignment fan-out failed for task %s", task_id)
    finally:
        session.close()


def run_task_update_fanout(
    session_factory: SessionFactory,
    channel: RealtimeChannel,
    *,
    task_id: int,
    actor_id: int,
    notification_type: NotificationType,
) -> None:
    """Background job notifying the creator and assignee of an edited task."""

    try:
        session = session_factory()
    except Exception:
        logger.exception("Task update fan-out could not open a session for task %s", task_id)
        return
    try:
        loaded = TaskRepository(session).get_with_project(task_id)
        actor = UserRepository(session).get(actor_id)
        if loaded is None or actor is None:
            logger.warning(
                "Task update fan-out skipped: task %s or actor %s no longer exists",
                task_id,
                actor_id,
            )
            return
        task, project = loaded
        NotificationFanout(session, channel).notify_task_updated(
            task=task,
            project=project,
            actor=actor,
            notification_type=NotificationType(notification_type),
        )
    except Exception:
        logger.exception("Task update fan-out failed for task %s", task_id)
    finally:
        session.close()


__all__ = [
    "NotificationFanout",
    "Relation",
    "SessionFactory",
    "chat_message_notification_text",
    "classify_relevance",
    "interested_parties",
    "run_task_assignment_fanout",
    "run_task_chat_fanout",
    "run_task_update_fanout",
    "task_assigned_notification_text",
    "task_updated_notification_text",
]
