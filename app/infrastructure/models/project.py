"""SQLAlchemy model for planning projects."""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Table
from sqlalchemy.orm import relationship

from app.infrastructure.database import Base
from app.utils import now_in_app_naive_datetime


project_collaborator_table = Table(
    "project_collaborator",
    Base.metadata,
    Column(
        "project_id",
        Integer,
        ForeignKey("project.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column(
        "user_id",
        Integer,
        ForeignKey("user.id", ondelete="CASCADE"),
        primary_key=True,
    ),
)


class ProjectModel(Base):
    """Database representation of a project and its team."""

    __tablename__ = "project"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(200), nullable=False)
    lead_id = Column(
        Integer,
        ForeignKey("user.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    formulator_id = Column(
        Integer,
        ForeignKey("user.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    created_at = Column(DateTime, nullable=False, default=now_in_app_naive_datetime)

    collaborators = relationship(
        "UserModel",
        secondary=project_collaborator_table,
        lazy="selectin",
    )
    tasks = relationship(
        "TaskModel",
        back_populates="project",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )


__all__ = ["ProjectModel", "project_collaborator_table"]
