"""Tests for notification categories and unread counters."""

from __future__ import annotations

import pytest

from app.domain.entities import (
    ChatMessagePage,
    Notification,
    NotificationCategory,
    NotificationType,
    UnreadCounts,
    category_for_type,
)


@pytest.mark.parametrize(
    "notification_type",
    [NotificationType.NEW_TASK_MESSAGE, NotificationType.TASK_MENTION],
)
def test_chat_types_belong_to_chat_category(notification_type: NotificationType) -> None:
    assert category_for_type(notification_type) is NotificationCategory.CHAT


@pytest.mark.parametrize(
    "notification_type",
    [
        NotificationType.NEW_TASK_ASSIGNED,
        NotificationType.TASK_STATUS_CHANGED,
        NotificationType.TASK_INFO_CHANGED,
        NotificationType.TASK_COMPLETED,
        NotificationType.TASK_DUE_SOON,
    ],
)
def test_other_types_belong_to_system_category(notification_type: NotificationType) -> None:
    assert category_for_type(notification_type) is NotificationCategory.SYSTEM


def test_build_resolves_category_and_starts_unread() -> None:
    notification = Notification.build(
        user_id=9,
        notification_type="TASK_MENTION",
        message="You were mentioned",
    )

    assert notification.type is NotificationType.TASK_MENTION
    assert notification.category is NotificationCategory.CHAT
    assert notification.read is False
    assert notification.read_at is None
    assert notification.id is None


@pytest.mark.parametrize("raw", ["chat", "Chat", " CHAT "])
def test_category_parse_ignores_case(raw: str) -> None:
    assert NotificationCategory.parse(raw) is NotificationCategory.CHAT


def test_category_parse_rejects_unknown_values() -> None:
    with pytest.raises(ValueError, match="SYSTEM or CHAT"):
        NotificationCategory.parse("email")


def test_unread_counts_event_payload() -> None:
    counts = UnreadCounts(system=2, chat=5)

    assert counts.total == 7
    assert counts.as_event_payload() == {"systemCount": 2, "chatCount": 5}


@pytest.mark.parametrize(
    ("total", "page_size", "expected"),
    [(0, 20, 0), (1, 20, 1), (20, 20, 1), (21, 20, 2)],
)
def test_chat_message_page_total_pages(total: int, page_size: int, expected: int) -> None:
    page = ChatMessagePage(messages=[], total=total, page=1, page_size=page_size)

    assert page.total_pages == expected
