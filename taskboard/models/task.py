import enum
from sqlalchemy import Column, String, Text, DateTime, ForeignKey, Uuid
from sqlalchemy.orm import relationship

from ..core.database import Base
from .base import new_id, utc_now


class TaskStatus(str, enum.Enum):
    """Task status enumeration"""
    TODO = "todo"
    DOING = "doing"
    DONE = "done"


class Task(Base):
    """Task model for database"""
    __tablename__ = "tasks"

    id = Column(Uuid, primary_key=True, default=new_id)
    title = Column(String(200), nullable=False, index=True)
    description = Column(Text, nullable=True)
    status = Column(
        String(20),
        default=TaskStatus.TODO.value,
        nullable=False,
        index=True
    )

    project_id = Column(Uuid, ForeignKey("projects.id", ondelete="CASCADE"), nullable=False, index=True)
    assignee_id = Column(Uuid, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)

    created_at = Column(DateTime(timezone=True), default=utc_now, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utc_now, onupdate=utc_now, nullable=False)

    project = relationship("Project", back_populates="tasks")
    assignee = relationship("User", back_populates="assigned_tasks")

    def __repr__(self):
        return f"<Task(id={self.id}, title='{self.title}', status='{self.status}')>"
