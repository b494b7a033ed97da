"""Domain entity representing a project task."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class TaskStatus(str, Enum):
    """Workflow states of a task."""

    PENDING = "PENDING"
    IN_PROGRESS = "IN_PROGRESS"
    IN_REVIEW = "IN_REVIEW"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"

    @property
    def label(self) -> str:
        return self.value.replace("_", " ").lower()


@dataclass
class Task:
    """A unit of work belonging to a project."""

    id: int
    project_id: int
    creator_id: int
    title: str
    assignee_id: int | None = None
    status: TaskStatus = TaskStatus.PENDING
    created_at: datetime | None = None

    @property
    def path(self) -> str:
        """Client route of the task detail (and its chat)."""

        return f"/projects/{self.project_id}/tasks/{self.id}"


def task_path_fragment(task_id: int) -> str:
    """Return the URL segment that identifies ``task_id`` inside a client route."""

    return f"/tasks/{task_id}"


__all__ = ["Task", "TaskStatus", "task_path_fragment"]
