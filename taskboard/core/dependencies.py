"""Service providers for FastAPI's dependency injection."""
from fastapi import Depends
from sqlalchemy.orm import Session

from .database import get_db
from .rabbitmq import RabbitMQPublisher, get_event_publisher
from ..services.auth import AuthService
from ..services.project import ProjectService
from ..services.task import TaskService
from ..services.user import UserService


def get_user_service(db: Session = Depends(get_db)) -> UserService:
    return UserService(db)


def get_auth_service(
    db: Session = Depends(get_db),
    publisher: RabbitMQPublisher = Depends(get_event_publisher),
) -> AuthService:
    return AuthService(db, publisher)


def get_project_service(db: Session = Depends(get_db)) -> ProjectService:
    return ProjectService(db)


def get_task_service(
    db: Session = Depends(get_db),
    publisher: RabbitMQPublisher = Depends(get_event_publisher),
) -> TaskService:
    return TaskService(db, publisher)
