import logging
from typing import Optional, Tuple
from sqlalchemy.orm import Session

from ..core.exceptions import ForbiddenError, UnauthorizedError
from ..core.jwt_handler import create_access_token
from ..core.rabbitmq import RabbitMQPublisher
from ..models import User
from ..utils.security import verify_password
from .user import UserService

logger = logging.getLogger(__name__)


class AuthService:
    """Registration and login."""

    def __init__(self, db: Session, publisher: RabbitMQPublisher):
        self.db = db
        self.publisher = publisher
        self.users = UserService(db)

    def register(self, email: str, password: str, name: Optional[str] = None) -> User:
        user = self.users.create_user(email=email, password=password, name=name)

        # publish event for other services (notifications etc.)
        self.publisher.publish_event("user.registered", {"user_id": str(user.id), "email": user.email})
        return user

    def login(self, email: str, password: str) -> Tuple[User, str]:
        user = self.users.find_by_email(email)
        if not user or not verify_password(password, user.password):
            logger.warning("Failed login attempt")
            raise UnauthorizedError("Invalid email or password")

        if not user.is_eligible:
            logger.warning(f"Login refused for user {user.id}: account is {user.status}")
            raise ForbiddenError("Account is not active")

        token = create_access_token(user.id, user.email, user.token_version)
        logger.info(f"User {user.id} logged in")
        return user, token
