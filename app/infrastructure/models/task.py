"""SQLAlchemy model for project tasks."""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from app.domain.entities import TaskStatus
from app.infrastructure.database import Base
from app.utils import now_in_app_naive_datetime


class TaskModel(Base):
    """Database representation of a task inside a project."""

    __tablename__ = "task"

    id = Column(Integer, primary_key=True, index=True)
    project_id = Column(
        Integer,
        ForeignKey("project.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    creator_id = Column(Integer, ForeignKey("user.id"), nullable=False, index=True)
    assignee_id = Column(
        Integer,
        ForeignKey("user.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    title = Column(String(200), nullable=False)
    status = Column(String(20), nullable=False, default=TaskStatus.PENDING.value)
    created_at = Column(DateTime, nullable=False, default=now_in_app_naive_datetime)

    project = relationship("ProjectModel", back_populates="tasks", lazy="joined")
    messages = relationship(
        "ChatMessageModel",
        back_populates="task",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )


__all__ = ["TaskModel"]
