"""
Task service.

Every operation is scoped to the calling user. The owner of a task's
project may do anything with it; an assignee may only view it.
"""
import logging
import math
from typing import Any, Dict, List, Optional, Tuple
from uuid import UUID
from sqlalchemy.orm import Session, joinedload

from ..core.exceptions import ForbiddenError, NotFoundError, ValidationError
from ..core.rabbitmq import RabbitMQPublisher
from ..models import Project, Task, TaskStatus, User, UserStatus

logger = logging.getLogger(__name__)

SORT_COLUMNS = {
    "createdAt": Task.created_at,
    "updatedAt": Task.updated_at,
    "title": Task.title,
    "status": Task.status,
}


def _status_value(status: Any) -> str:
    try:
        return TaskStatus(getattr(status, "value", status)).value
    except ValueError:
        allowed = ", ".join(s.value for s in TaskStatus)
        raise ValidationError(f"Invalid task status '{status}', expected one of: {allowed}") from None


def page_metadata(page: int, limit: int, total: int) -> Dict[str, int]:
    return {
        "page": page,
        "limit": limit,
        "total": total,
        "total_pages": math.ceil(total / limit) if limit else 0,
    }


class TaskService:
    """Business logic and persistence for tasks."""

    def __init__(self, db: Session, publisher: RabbitMQPublisher):
        self.db = db
        self.publisher = publisher

    def _load(self, task_id: UUID) -> Task:
        task = (
            self.db.query(Task)
            .options(joinedload(Task.project), joinedload(Task.assignee))
            .filter(Task.id == task_id)
            .first()
        )
        if not task:
            raise NotFoundError("Task not found")
        return task

    def list_tasks_by_project(
        self,
        user_id: UUID,
        project_id: UUID,
        page: int = 1,
        limit: int = 10,
        sort: str = "createdAt",
        sort_order: str = "desc",
        status: Optional[Any] = None,
        assignee_id: Optional[UUID] = None,
    ) -> Tuple[List[Task], Dict[str, int]]:
        """
        Get one page of a project's tasks.

        Ownership is part of the query. When nothing matches, the project is
        looked up to tell a missing project (NotFoundError) from one the caller
        does not own (ForbiddenError); an owned project with no tasks yields an
        empty page.

        Returns:
            tuple: The tasks and the page metadata
        """
        if page < 1 or limit < 1:
            raise ValidationError("page and limit must be positive")
        if sort not in SORT_COLUMNS:
            raise ValidationError(f"Cannot sort by '{sort}'")

        query = (
            self.db.query(Task)
            .join(Project, Task.project_id == Project.id)
            .filter(Task.project_id == project_id, Project.owner_id == user_id)
        )
        if status:
            query = query.filter(Task.status == _status_value(status))
        if assignee_id:
            query = query.filter(Task.assignee_id == assignee_id)

        total = query.count()

        if total == 0:
            project = self.db.get(Project, project_id)
            if not project:
                raise NotFoundError("Project not found")
            if project.owner_id != user_id:
                logger.warning(f"User {user_id} denied task listing for project {project_id}")
                raise ForbiddenError("You do not have permission to view tasks for this project")

        column = SORT_COLUMNS[sort]
        ordering = column.asc() if sort_order == "asc" else column.desc()
        tasks = (
            query.order_by(ordering, Task.id)
            .offset((page - 1) * limit)
            .limit(limit)
            .all()
        )

        return tasks, page_metadata(page, limit, total)

    def get_task(self, task_id: UUID, user_id: UUID) -> Task:
        """Task with its project and assignee; visible to the assignee and the project owner."""
        task = self._load(task_id)

        if task.assignee_id != user_id and task.project.owner_id != user_id:
            logger.warning(f"User {user_id} denied view of task {task_id}")
            raise ForbiddenError("You do not have permission to view this task")

        return task

    def create_task(
        self,
        user_id: UUID,
        project_id: UUID,
        title: str,
        description: Optional[str] = None,
        status: Any = TaskStatus.TODO,
    ) -> Task:
        """Create an unassigned task; only an active owner of the project may."""
        project = self.db.get(Project, project_id)
        if not project:
            raise NotFoundError("Project not found")

        if project.owner_id != user_id:
            logger.warning(f"User {user_id} denied task creation in project {project_id}")
            raise ForbiddenError("Only project owner can create tasks")

        # Lock the owner row so a concurrent deactivation waits for this insert
        owner = self.db.query(User).filter(User.id == project.owner_id).with_for_update().first()
        if not owner or not owner.is_eligible:
            raise ForbiddenError("Project owner is not active or has been deleted")

        task = Task(
            title=title,
            description=description,
            status=_status_value(status),
            project_id=project.id,
        )
        self.db.add(task)
        self.db.commit()
        self.db.refresh(task)

        logger.info(f"Created task {task.id} in project {project_id}")
        self.publisher.publish_event("task.created", {
            "task_id": str(task.id),
            "project_id": str(task.project_id),
            "title": task.title,
        })
        return task

    def update_task(self, task_id: UUID, user_id: UUID, data: Dict[str, Any]) -> Task:
        """
        Apply a partial update. Only the project owner may update, assignees
        included; a new assignee must be an active, non-deleted user.
        """
        task = self._load(task_id)

        if task.project.owner_id != user_id:
            logger.warning(f"User {user_id} denied update of task {task_id}")
            raise ForbiddenError("You do not have permission to update this task")

        status = _status_value(data["status"]) if data.get("status") is not None else None

        reassigned = False
        if "assignee_id" in data:
            assignee_id = data["assignee_id"]
            if assignee_id is not None and assignee_id != task.assignee_id:
                assignee = (
                    self.db.query(User)
                    .filter(
                        User.id == assignee_id,
                        User.deleted_at.is_(None),
                        User.status == UserStatus.ACTIVE.value,
                    )
                    .with_for_update()
                    .first()
                )
                if not assignee:
                    raise NotFoundError("Assignee not found")
                reassigned = True
            task.assignee_id = assignee_id

        if data.get("title") is not None:
            task.title = data["title"]
        if "description" in data:
            task.description = data["description"]
        if status is not None:
            task.status = status

        self.db.commit()
        task = self._load(task_id)

        logger.info(f"Updated task {task_id}")
        if reassigned:
            self.publisher.publish_event("task.assigned", {
                "task_id": str(task.id),
                "assignee_id": str(task.assignee_id),
            })
        return task

    def delete_task(self, task_id: UUID, user_id: UUID) -> None:
        task = self._load(task_id)

        if task.project.owner_id != user_id:
            logger.warning(f"User {user_id} denied deletion of task {task_id}")
            raise ForbiddenError("Only project owner can delete tasks")

        self.db.delete(task)
        self.db.commit()

        logger.info(f"Deleted task {task_id}")
