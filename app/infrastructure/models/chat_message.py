"""SQLAlchemy model for task chat messages."""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, Text
from sqlalchemy.orm import relationship

from app.infrastructure.database import Base
from app.utils import now_in_app_naive_datetime


class ChatMessageModel(Base):
    """Database representation of a message posted on a task chat."""

    __tablename__ = "task_chat_message"

    id = Column(Integer, primary_key=True, index=True)
    task_id = Column(
        Integer,
        ForeignKey("task.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    sender_id = Column(Integer, ForeignKey("user.id"), nullable=False, index=True)
    content = Column(Text, nullable=False)
    created_at = Column(DateTime, nullable=False, default=now_in_app_naive_datetime)

    task = relationship("TaskModel", back_populates="messages")
    sender = relationship("UserModel", lazy="joined")


__all__ = ["ChatMessageModel"]
