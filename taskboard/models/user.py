import enum
from sqlalchemy import Column, Integer, String, DateTime, Uuid
from sqlalchemy.orm import relationship

from ..core.database import Base
from .base import new_id, utc_now


class UserStatus(str, enum.Enum):
    """Account status"""
    ACTIVE = "active"
    INACTIVE = "inactive"
    SUSPENDED = "suspended"


class User(Base):
    """User account"""
    __tablename__ = "users"

    id = Column(Uuid, primary_key=True, default=new_id)
    email = Column(String(255), unique=True, index=True, nullable=False)
    password = Column(String(255), nullable=False)
    name = Column(String(100), nullable=True)
    status = Column(String(20), default=UserStatus.ACTIVE.value, nullable=False, index=True)

    # Bumped on password change; tokens carrying an older value are rejected
    token_version = Column(Integer, default=0, nullable=False)

    deleted_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), default=utc_now, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utc_now, onupdate=utc_now, nullable=False)

    projects = relationship("Project", back_populates="owner", cascade="all, delete-orphan")
    assigned_tasks = relationship("Task", back_populates="assignee")

    @property
    def is_eligible(self) -> bool:
        """Active and not soft-deleted."""
        return self.status == UserStatus.ACTIVE.value and self.deleted_at is None

    def __repr__(self):
        return f"<User(id={self.id}, email='{self.email}', status='{self.status}')>"
