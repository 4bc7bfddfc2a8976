from typing import List
from uuid import UUID
from fastapi import APIRouter, Depends, status

from ..core.auth import CurrentUser, get_current_user
from ..core.dependencies import get_project_service
from ..schemas.common import ApiResponse, MessageResponse
from ..schemas.project import ProjectCreate, ProjectOut, ProjectUpdate
from ..services.project import ProjectService

router = APIRouter()


@router.get("", response_model=ApiResponse[List[ProjectOut]])
def list_projects(
    current_user: CurrentUser = Depends(get_current_user),
    projects: ProjectService = Depends(get_project_service),
):
    """Projects owned by the caller, newest first"""
    data = [ProjectOut.model_validate(p) for p in projects.list_projects(current_user.id)]
    return ApiResponse(message="Projects retrieved successfully", data=data)


@router.post("", response_model=ApiResponse[ProjectOut], status_code=status.HTTP_201_CREATED)
def create_project(
    payload: ProjectCreate,
    current_user: CurrentUser = Depends(get_current_user),
    projects: ProjectService = Depends(get_project_service),
):
    project = projects.create_project(current_user.id, payload.title, payload.description)
    return ApiResponse(message="Project created successfully", data=ProjectOut.model_validate(project))


@router.get("/{project_id}", response_model=ApiResponse[ProjectOut])
def get_project(
    project_id: UUID,
    current_user: CurrentUser = Depends(get_current_user),
    projects: ProjectService = Depends(get_project_service),
):
    project = projects.get_project(project_id, current_user.id)
    return ApiResponse(message="Project retrieved successfully", data=ProjectOut.model_validate(project))


@router.put("/{project_id}", response_model=ApiResponse[ProjectOut])
def update_project(
    project_id: UUID,
    payload: ProjectUpdate,
    current_user: CurrentUser = Depends(get_current_user),
    projects: ProjectService = Depends(get_project_service),
):
    project = projects.update_project(project_id, current_user.id, payload.model_dump(exclude_unset=True))
    return ApiResponse(message="Project updated successfully", data=ProjectOut.model_validate(project))


@router.delete("/{project_id}", response_model=MessageResponse)
def delete_project(
    project_id: UUID,
    current_user: CurrentUser = Depends(get_current_user),
    projects: ProjectService = Depends(get_project_service),
):
    projects.delete_project(project_id, current_user.id)
    return MessageResponse(message="Project deleted successfully")
