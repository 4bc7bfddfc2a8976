import logging
from typing import Any, Dict, List, Optional
from uuid import UUID
from sqlalchemy.orm import Session

from ..core.exceptions import ForbiddenError, NotFoundError
from ..models import Project, User

logger = logging.getLogger(__name__)


class ProjectService:
    """Projects are the authorization root: the owner controls everything in them."""

    def __init__(self, db: Session):
        self.db = db

    def _get_owned(self, project_id: UUID, user_id: UUID, action: str) -> Project:
        project = self.db.get(Project, project_id)
        if not project:
            raise NotFoundError("Project not found")
        if project.owner_id != user_id:
            logger.warning(f"User {user_id} denied {action} on project {project_id}")
            raise ForbiddenError(f"You do not have permission to {action} this project")
        return project

    def list_projects(self, owner_id: UUID) -> List[Project]:
        return (
            self.db.query(Project)
            .filter(Project.owner_id == owner_id)
            .order_by(Project.created_at.desc(), Project.id)
            .all()
        )

    def get_project(self, project_id: UUID, user_id: UUID) -> Project:
        return self._get_owned(project_id, user_id, "view")

    def create_project(self, owner_id: UUID, title: str, description: Optional[str] = None) -> Project:
        owner = self.db.query(User).filter(User.id == owner_id).with_for_update().first()
        if not owner or not owner.is_eligible:
            raise ForbiddenError("Project owner is not active or has been deleted")

        project = Project(title=title, description=description, owner_id=owner_id)
        self.db.add(project)
        self.db.commit()
        self.db.refresh(project)

        logger.info(f"Created project {project.id} for user {owner_id}")
        return project

    def update_project(self, project_id: UUID, user_id: UUID, data: Dict[str, Any]) -> Project:
        project = self._get_owned(project_id, user_id, "update")

        if data.get("title") is not None:
            project.title = data["title"]
        if "description" in data:
            project.description = data["description"]

        self.db.commit()
        self.db.refresh(project)
        return project

    def delete_project(self, project_id: UUID, user_id: UUID) -> None:
        """Hard delete; the project's tasks go with it."""
        project = self._get_owned(project_id, user_id, "delete")
        self.db.delete(project)
        self.db.commit()

        logger.info(f"Deleted project {project_id}")
