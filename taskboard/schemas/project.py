from datetime import datetime
from typing import Optional
from uuid import UUID
from pydantic import ConfigDict, Field

from .common import CamelModel


class ProjectBase(CamelModel):
    model_config = ConfigDict(str_strip_whitespace=True)


class ProjectCreate(ProjectBase):
    title: str = Field(..., min_length=2, max_length=200, description="Project title")
    description: Optional[str] = Field(None, max_length=2000)


class ProjectUpdate(ProjectBase):
    title: Optional[str] = Field(None, min_length=2, max_length=200)
    description: Optional[str] = Field(None, max_length=2000)


class ProjectBrief(CamelModel):
    id: UUID
    title: str
    owner_id: UUID


class ProjectOut(ProjectBrief):
    description: Optional[str] = None
    created_at: datetime
    updated_at: datetime
