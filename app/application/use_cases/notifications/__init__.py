"""Notification store and fan-out of task events."""

from .fanout import (
    NotificationFanout,
    Relation,
    classify_relevance,
    interested_parties,
    run_task_assignment_fanout,
    run_task_chat_fanout,
    run_task_update_fanout,
)
from .service import NotificationService

__all__ = [
    "NotificationFanout",
    "NotificationService",
    "Relation",
    "classify_relevance",
    "interested_parties",
    "run_task_assignment_fanout",
    "run_task_chat_fanout",
    "run_task_update_fanout",
]
