"""Schemas for task endpoints."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from app.domain.entities import TaskStatus


class TaskAssigneeUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    assignee_id: int | None = Field(..., ge=1, description="New assignee, null to unassign")


class TaskUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    title: str | None = Field(default=None, min_length=1, max_length=200)
    status: TaskStatus | None = None


class TaskRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    project_id: int
    creator_id: int
    assignee_id: int | None = None
    title: str
    status: TaskStatus


__all__ = ["TaskAssigneeUpdate", "TaskRead", "TaskUpdate"]
