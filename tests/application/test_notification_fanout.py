"""Tests for the fan-out jobs and the task assignment notification."""

from __future__ import annotations

import pytest
from sqlalchemy.orm import sessionmaker

from app.application.errors import BadRequestError, ForbiddenError, NotFoundError
from app.application.realtime import EVENT_UNREAD_COUNT_UPDATED
from app.application.use_cases.notifications import (
    NotificationFanout,
    NotificationService,
    run_task_assignment_fanout,
    run_task_chat_fanout,
)
from app.application.use_cases.tasks import assign_task
from app.domain.entities import ChatMessage, NotificationCategory, NotificationType
from app.infrastructure.database import engine
from app.infrastructure.models import NotificationModel, TaskModel
from app.infrastructure.repositories import ChatMessageRepository, TaskRepository


@pytest.fixture()
def session_factory():
    return sessionmaker(bind=engine, autoflush=False)


def _notifications(session) -> list[NotificationModel]:
    session.expire_all()
    return session.query(NotificationModel).order_by(NotificationModel.user_id).all()


def _store_message(session, sender_id: int, task_id: int = 42) -> ChatMessage:
    return ChatMessageRepository(session).create(
        ChatMessage(id=None, task_id=task_id, sender_id=sender_id, content="hola")
    )


def test_one_failing_recipient_does_not_stop_the_others(
    session, channel, chat_scenario, monkeypatch
) -> None:
    original_create = NotificationService.create

    def flaky_create(self, *, user_id, **fields):
        if user_id == 3:
            raise RuntimeError("constraint violated")
        return original_create(self, user_id=user_id, **fields)

    monkeypatch.setattr(NotificationService, "create", flaky_create)
    task, project = TaskRepository(session).get_with_project(42)
    sender = chat_scenario["users"]["collaborator"]
    message = _store_message(session, sender.id)

    created = NotificationFanout(session, channel).notify_task_chat_message(
        task=task, project=project, sender=sender, message=message
    )

    assert [item.user_id for item in created] == [9]
    assert [row.user_id for row in _notifications(session)] == [9]


def test_chat_job_skips_deleted_message(session, channel, session_factory, chat_scenario) -> None:
    run_task_chat_fanout(
        session_factory, channel, task_id=42, message_id=12345, sender_id=7
    )

    assert _notifications(session) == []
    assert channel.user_events == []


def test_chat_job_reloads_state_by_id(session, channel, session_factory, chat_scenario) -> None:
    message = _store_message(session, sender_id=9)

    run_task_chat_fanout(
        session_factory, channel, task_id=42, message_id=message.id, sender_id=9
    )

    assert [row.user_id for row in _notifications(session)] == [3, 7]


def test_chat_job_never_raises(channel, chat_scenario) -> None:
    def broken_factory():
        raise RuntimeError("pool exhausted")

    run_task_chat_fanout(broken_factory, channel, task_id=42, message_id=1, sender_id=7)
    run_task_assignment_fanout(broken_factory, channel, task_id=42, actor_id=3)


def test_assignment_notifies_new_assignee(session, channel, chat_scenario) -> None:
    lead = chat_scenario["users"]["lead"]

    task = assign_task(session, channel, task_id=42, assignee_id=7, actor=lead)

    assert task.assignee_id == 7
    rows = _notifications(session)
    assert [row.user_id for row in rows] == [7]
    assert rows[0].type == NotificationType.NEW_TASK_ASSIGNED.value
    assert rows[0].category == NotificationCategory.SYSTEM.value
    assert rows[0].destination_url == "/projects/5/tasks/42"
    assert rows[0].resource_id == 42
    assert rows[0].message == (
        "Laura Lead assigned you the task 'Land use survey' of project 'Riverside masterplan'."
    )
    assert channel.last_payload_for(7, EVENT_UNREAD_COUNT_UPDATED) == {
        "systemCount": 1,
        "chatCount": 0,
    }


def test_self_assignment_is_silent(session, channel, chat_scenario) -> None:
    lead = chat_scenario["users"]["lead"]

    assign_task(session, channel, task_id=42, assignee_id=3, actor=lead)

    assert _notifications(session) == []


def test_unchanged_assignee_is_not_notified_again(session, channel, chat_scenario) -> None:
    lead = chat_scenario["users"]["lead"]

    assign_task(session, channel, task_id=42, assignee_id=9, actor=lead)

    assert _notifications(session) == []


def test_clearing_the_assignee(session, channel, chat_scenario) -> None:
    admin = chat_scenario["users"]["admin"]

    task = assign_task(session, channel, task_id=42, assignee_id=None, actor=admin)

    assert task.assignee_id is None
    assert _notifications(session) == []


def test_assignment_permission_is_checked(session, channel, chat_scenario) -> None:
    collaborator = chat_scenario["users"]["collaborator"]

    with pytest.raises(ForbiddenError):
        assign_task(session, channel, task_id=42, assignee_id=7, actor=collaborator)

    session.expire_all()
    assert session.get(TaskModel, 42).assignee_id == 9


def test_assignment_requires_existing_active_assignee(session, channel, seed, chat_scenario) -> None:
    lead = chat_scenario["users"]["lead"]
    seed.user(50, is_active=False)

    with pytest.raises(NotFoundError):
        assign_task(session, channel, task_id=42, assignee_id=999, actor=lead)
    with pytest.raises(NotFoundError):
        assign_task(session, channel, task_id=42, assignee_id=50, actor=lead)
    with pytest.raises(NotFoundError):
        assign_task(session, channel, task_id=404, assignee_id=7, actor=lead)
    with pytest.raises(BadRequestError):
        assign_task(session, channel, task_id=0, assignee_id=7, actor=lead)
