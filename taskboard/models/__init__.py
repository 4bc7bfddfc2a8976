"""Database models for Taskboard."""
from .user import User, UserStatus
from .project import Project
from .task import Task, TaskStatus

__all__ = ["User", "UserStatus", "Project", "Task", "TaskStatus"]
