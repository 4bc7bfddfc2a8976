"""Pytest configuration and shared fixtures.

The environment is pointed at SQLite and a cheap bcrypt cost before the
application package is imported. Every test gets a fresh in-memory
database shared by the direct ``db`` session and the API client.
"""
import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["PASSWORD_HASH_ROUNDS"] = "4"
os.environ["RABBITMQ_ENABLED"] = "false"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["ENVIRONMENT"] = "test"

from datetime import datetime, timezone
from typing import Any, Dict, List, Tuple

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from taskboard.core.database import Base, get_db
from taskboard.core.rabbitmq import get_event_publisher
from taskboard.main import app
from taskboard.models import Project, Task, TaskStatus, User, UserStatus
from taskboard.utils.security import get_password_hash

DEFAULT_PASSWORD = "password123"


class RecordingPublisher:
    """Stands in for the RabbitMQ publisher and keeps what was published."""

    def __init__(self):
        self.events: List[Tuple[str, Dict[str, Any]]] = []

    def publish_event(self, event_type: str, data: Dict[str, Any]) -> bool:
        self.events.append((event_type, data))
        return True

    def close(self):
        pass

    def types(self) -> List[str]:
        return [event_type for event_type, _ in self.events]


# ============================================================================
# Database Fixtures
# ============================================================================


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def publisher():
    return RecordingPublisher()


# ============================================================================
# Application Fixtures
# ============================================================================


@pytest.fixture
def client(session_factory, publisher):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_event_publisher] = lambda: publisher
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


# ============================================================================
# Data factories
# ============================================================================


def make_user(db, email: str, name: str = None, password: str = DEFAULT_PASSWORD,
              status: UserStatus = UserStatus.ACTIVE, deleted: bool = False,
              created_at: datetime = None) -> User:
    user = User(
        email=email,
        name=name,
        password=get_password_hash(password),
        status=status.value,
        deleted_at=datetime.now(timezone.utc) if deleted else None,
    )
    if created_at is not None:
        user.created_at = created_at
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def make_project(db, owner: User, title: str = "Project") -> Project:
    project = Project(title=title, owner_id=owner.id)
    db.add(project)
    db.commit()
    db.refresh(project)
    return project


def make_task(db, project: Project, title: str = "Task", status: TaskStatus = TaskStatus.TODO,
              assignee: User = None) -> Task:
    task = Task(
        title=title,
        status=status.value,
        project_id=project.id,
        assignee_id=assignee.id if assignee else None,
    )
    db.add(task)
    db.commit()
    db.refresh(task)
    return task


def register(client, email: str, password: str = DEFAULT_PASSWORD, name: str = None) -> Dict[str, Any]:
    body = {"email": email, "password": password}
    if name:
        body["name"] = name
    response = client.post("/api/auth/register", json=body)
    assert response.status_code == 201, response.text
    return response.json()["data"]


def login(client, email: str, password: str = DEFAULT_PASSWORD) -> Dict[str, str]:
    """Log in and return a Bearer header; the cookie jar is cleared so that
    several users can act through one client."""
    response = client.post("/api/auth/login", json={"email": email, "password": password})
    assert response.status_code == 200, response.text
    client.cookies.clear()
    return {"Authorization": f"Bearer {response.json()['data']['token']}"}
