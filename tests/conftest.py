"""Shared fixtures: a throwaway SQLite database, seed helpers and a fake realtime channel."""

from __future__ import annotations

import os
import tempfile
from functools import lru_cache
from pathlib import Path

import pytest

TEST_DB_PATH = Path(tempfile.gettempdir()) / "planning_office_api_test.db"
os.environ["DATABASE_URL"] = f"sqlite:///{TEST_DB_PATH}"
os.environ["SECRET_KEY"] = "test-secret"
os.environ["ACCESS_TOKEN_EXPIRE_MINUTES"] = "30"
os.environ["APP_TIMEZONE"] = "America/Bogota"

from app.config import reset_settings_cache  # noqa: E402

reset_settings_cache()

from app.domain.entities import (  # noqa: E402
    ROLE_ADMIN,
    ROLE_COORDINATOR,
    ROLE_USER,
    User,
)
from app.infrastructure.database import (  # noqa: E402
    Base,
    SessionLocal,
    engine,
    initialize_database,
)
from app.infrastructure.models import (  # noqa: E402
    ProjectModel,
    RoleModel,
    TaskModel,
    UserModel,
)
from app.infrastructure.repositories import UserRepository  # noqa: E402
from app.infrastructure.security import get_password_hash  # noqa: E402

DEFAULT_PASSWORD = "Secret123"


@lru_cache
def _hashed(password: str) -> str:
    return get_password_hash(password)


class RecordingChannel:
    """Realtime channel double that remembers every emitted event."""

    def __init__(self) -> None:
        self.user_events: list[tuple[int, str, object]] = []
        self.room_events: list[tuple[str, str, object]] = []

    def emit_to_user(self, user_id: int, event: str, payload: object) -> None:
        self.user_events.append((user_id, event, payload))

    def emit_to_room(self, room: str, event: str, payload: object) -> None:
        self.room_events.append((room, event, payload))

    def users_notified_of(self, event: str) -> set[int]:
        return {user_id for user_id, name, _ in self.user_events if name == event}

    def last_payload_for(self, user_id: int, event: str) -> object | None:
        for recorded_id, name, payload in reversed(self.user_events):
            if recorded_id == user_id and name == event:
                return payload
        return None


class Seeder:
    """Insert roles, users, projects and tasks straight through the ORM."""

    _ROLE_NAMES = {
        ROLE_ADMIN: "Administrator",
        ROLE_COORDINATOR: "Coordinator",
        ROLE_USER: "User",
    }

    def __init__(self, session) -> None:
        self.session = session

    def role(self, alias: str) -> RoleModel:
        role = self.session.query(RoleModel).filter_by(alias=alias).first()
        if role is None:
            role = RoleModel(name=self._ROLE_NAMES.get(alias, alias.title()), alias=alias)
            self.session.add(role)
            self.session.commit()
            self.session.refresh(role)
        return role

    def user(
        self,
        user_id: int | None = None,
        *,
        role: str = ROLE_USER,
        name: str | None = None,
        email: str | None = None,
        password: str = DEFAULT_PASSWORD,
        is_active: bool = True,
    ) -> User:
        label = user_id if user_id is not None else self.session.query(UserModel).count() + 100
        model = UserModel(
            id=user_id,
            role_id=self.role(role).id,
            name=name or f"User {label}",
            email=email or f"user{label}@example.com",
            password=_hashed(password),
            is_active=is_active,
        )
        self.session.add(model)
        self.session.commit()
        return UserRepository(self.session).get(model.id)

    def project(
        self,
        *,
        name: str = "Urban renewal plan",
        lead_id: int | None = None,
        formulator_id: int | None = None,
        collaborator_ids: tuple[int, ...] = (),
        project_id: int | None = None,
    ) -> ProjectModel:
        model = ProjectModel(
            id=project_id,
            name=name,
            lead_id=lead_id,
            formulator_id=formulator_id,
        )
        if collaborator_ids:
            model.collaborators = (
                self.session.query(UserModel).filter(UserModel.id.in_(collaborator_ids)).all()
            )
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return model

    def task(
        self,
        *,
        project_id: int,
        creator_id: int,
        assignee_id: int | None = None,
        title: str = "Zoning review",
        task_id: int | None = None,
    ) -> TaskModel:
        model = TaskModel(
            id=task_id,
            project_id=project_id,
            creator_id=creator_id,
            assignee_id=assignee_id,
            title=title,
        )
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return model


@pytest.fixture(autouse=True)
def reset_database():
    """Ensure every test starts from empty tables."""

    Base.metadata.drop_all(bind=engine)
    initialize_database()
    yield
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture()
def session():
    with SessionLocal() as db:
        yield db


@pytest.fixture()
def channel() -> RecordingChannel:
    return RecordingChannel()


@pytest.fixture()
def seed(session) -> Seeder:
    return Seeder(session)


@pytest.fixture()
def chat_scenario(seed):
    """Task 42 created by user 3 (also project lead), assigned to 9, with collaborator 7.

    Also present: an administrator (11) and a coordinator (12) with no link to
    the task, a coordinator formulator (13), and an outsider (20).
    """

    users = {
        "lead": seed.user(3, name="Laura Lead"),
        "assignee": seed.user(9, name="Andres Assignee"),
        "collaborator": seed.user(7, name="Carla Collaborator"),
        "admin": seed.user(11, role=ROLE_ADMIN, name="Ada Admin"),
        "coordinator": seed.user(12, role=ROLE_COORDINATOR, name="Coco Coordinator"),
        "formulator": seed.user(13, role=ROLE_COORDINATOR, name="Fede Formulator"),
        "outsider": seed.user(20, name="Otto Outsider"),
    }
    project = seed.project(
        project_id=5,
        name="Riverside masterplan",
        lead_id=3,
        formulator_id=13,
        collaborator_ids=(7,),
    )
    task = seed.task(
        task_id=42,
        project_id=project.id,
        creator_id=3,
        assignee_id=9,
        title="Land use survey",
    )
    return {"users": users, "project": project, "task": task}
