"""Persistence helpers for tasks and their owning projects."""

from __future__ import annotations

from sqlalchemy.orm import Session, joinedload, selectinload

from app.domain.entities import Project, Task, TaskStatus
from app.infrastructure.models import ProjectModel, TaskModel
from app.utils import ensure_app_timezone


class TaskRepository:
    """Load tasks together with the project team used by access checks."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, task_id: int) -> Task | None:
        model = self.session.get(TaskModel, task_id)
        return self._to_entity(model) if model else None

    def get_with_project(self, task_id: int) -> tuple[Task, Project] | None:
        """Return ``task_id`` and its project (lead, formulator, collaborators)."""

        model = (
            self.session.query(TaskModel)
            .options(
                joinedload(TaskModel.project).selectinload(ProjectModel.collaborators)
            )
            .filter(TaskModel.id == task_id)
            .first()
        )
        if model is None:
            return None
        return self._to_entity(model), self._project_to_entity(model.project)

    def update_assignee(self, task_id: int, assignee_id: int | None) -> Task:
        model = self.session.get(TaskModel, task_id)
        if model is None:
            msg = f"Task with id {task_id} not found"
            raise ValueError(msg)
        model.assignee_id = assignee_id
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    def update_details(
        self,
        task_id: int,
        *,
        title: str | None = None,
        status: TaskStatus | None = None,
    ) -> Task:
        model = self.session.get(TaskModel, task_id)
        if model is None:
            msg = f"Task with id {task_id} not found"
            raise ValueError(msg)
        if title is not None:
            model.title = title
        if status is not None:
            model.status = TaskStatus(status).value
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    @staticmethod
    def _to_entity(model: TaskModel) -> Task:
        return Task(
            id=model.id,
            project_id=model.project_id,
            creator_id=model.creator_id,
            title=model.title,
            assignee_id=model.assignee_id,
            status=TaskStatus(model.status),
            created_at=ensure_app_timezone(model.created_at),
        )

    @staticmethod
    def _project_to_entity(model: ProjectModel) -> Project:
        return Project(
            id=model.id,
            name=model.name,
            lead_id=model.lead_id,
            formulator_id=model.formulator_id,
            collaborator_ids=frozenset(user.id for user in model.collaborators),
        )


__all__ = ["TaskRepository"]
