from typing import Optional
from uuid import UUID
from fastapi import APIRouter, Depends, Query, status

from ..core.auth import CurrentUser, get_current_user
from ..core.config import settings
from ..core.dependencies import get_task_service
from ..schemas.common import ApiResponse, MessageResponse, Page, Pagination
from ..schemas.task import (
    SortOrder, TaskCreate, TaskDetail, TaskOut, TaskSortField, TaskStatus, TaskUpdate
)
from ..services.task import TaskService

router = APIRouter()


@router.get("/by-project/{project_id}", response_model=ApiResponse[Page[TaskOut]])
def get_tasks_by_project(
    project_id: UUID,
    page: int = Query(1, ge=1, description="Page number, starting at 1"),
    limit: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size, description="Page size"),
    sort: TaskSortField = Query(TaskSortField.CREATED_AT, description="Field to sort by"),
    sort_order: SortOrder = Query(SortOrder.DESC, alias="sortOrder", description="Sort order"),
    status_filter: Optional[TaskStatus] = Query(None, alias="status", description="Filter by status"),
    assignee_id: Optional[UUID] = Query(None, alias="assigneeId", description="Filter by assignee"),
    current_user: CurrentUser = Depends(get_current_user),
    tasks: TaskService = Depends(get_task_service),
):
    """Get a page of a project's tasks; owner only"""
    items, pagination = tasks.list_tasks_by_project(
        current_user.id,
        project_id,
        page=page,
        limit=limit,
        sort=sort.value,
        sort_order=sort_order.value,
        status=status_filter,
        assignee_id=assignee_id,
    )
    result = Page[TaskOut](
        data=[TaskOut.model_validate(t) for t in items],
        pagination=Pagination(**pagination),
    )
    return ApiResponse(message="Tasks retrieved successfully", data=result)


@router.get("/{task_id}", response_model=ApiResponse[TaskDetail])
def get_task(
    task_id: UUID,
    current_user: CurrentUser = Depends(get_current_user),
    tasks: TaskService = Depends(get_task_service),
):
    """Get a task; visible to its assignee and the project owner"""
    task = tasks.get_task(task_id, current_user.id)
    return ApiResponse(message="Task retrieved successfully", data=TaskDetail.model_validate(task))


@router.post("", response_model=ApiResponse[TaskOut], status_code=status.HTTP_201_CREATED)
def create_task(
    payload: TaskCreate,
    current_user: CurrentUser = Depends(get_current_user),
    tasks: TaskService = Depends(get_task_service),
):
    """Create a task in a project the caller owns"""
    task = tasks.create_task(
        current_user.id,
        payload.project_id,
        title=payload.title,
        description=payload.description,
        status=payload.status,
    )
    return ApiResponse(message="Task created successfully", data=TaskOut.model_validate(task))


@router.put("/{task_id}", response_model=ApiResponse[TaskDetail])
def update_task(
    task_id: UUID,
    payload: TaskUpdate,
    current_user: CurrentUser = Depends(get_current_user),
    tasks: TaskService = Depends(get_task_service),
):
    """Partially update a task; project owner only"""
    task = tasks.update_task(task_id, current_user.id, payload.model_dump(exclude_unset=True))
    return ApiResponse(message="Task updated successfully", data=TaskDetail.model_validate(task))


@router.delete("/{task_id}", response_model=MessageResponse)
def delete_task(
    task_id: UUID,
    current_user: CurrentUser = Depends(get_current_user),
    tasks: TaskService = Depends(get_task_service),
):
    """Delete a task; project owner only"""
    tasks.delete_task(task_id, current_user.id)
    return MessageResponse(message="Task deleted successfully")
