"""
Pydantic schemas for tasks.
"""
from datetime import datetime
from enum import Enum
from typing import Optional
from uuid import UUID
from pydantic import ConfigDict, Field

from .common import CamelModel
from .project import ProjectBrief
from .user import UserBrief


class TaskStatus(str, Enum):
    """Task status enumeration for API"""
    TODO = "todo"
    DOING = "doing"
    DONE = "done"


class TaskSortField(str, Enum):
    CREATED_AT = "createdAt"
    UPDATED_AT = "updatedAt"
    TITLE = "title"
    STATUS = "status"


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"


class TaskCreate(CamelModel):
    """Schema for creating a task"""
    model_config = ConfigDict(str_strip_whitespace=True)

    title: str = Field(..., min_length=2, max_length=200, description="Task title")
    description: Optional[str] = Field(None, max_length=2000, description="Task description")
    status: TaskStatus = Field(..., description="Task status")
    project_id: UUID = Field(..., description="Project the task belongs to")


class TaskUpdate(CamelModel):
    """Schema for updating a task; an explicit null assigneeId unassigns"""
    model_config = ConfigDict(str_strip_whitespace=True)

    title: Optional[str] = Field(None, min_length=2, max_length=200)
    description: Optional[str] = Field(None, max_length=2000)
    status: Optional[TaskStatus] = None
    assignee_id: Optional[UUID] = None


class TaskOut(CamelModel):
    """Schema for task response"""
    id: UUID
    title: str
    description: Optional[str] = None
    status: TaskStatus
    project_id: UUID
    assignee_id: Optional[UUID] = None
    created_at: datetime
    updated_at: datetime


class TaskDetail(TaskOut):
    """Task with a narrow view of its project and assignee"""
    project: ProjectBrief
    assignee: Optional[UserBrief] = None
