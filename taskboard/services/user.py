"""
User service: account CRUD, profile self-service and password change.
"""
import logging
from typing import Any, Dict, List, Optional
from uuid import UUID
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..core.exceptions import ConflictError, NotFoundError, ValidationError
from ..models import User
from ..utils.security import get_password_hash, verify_password

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = ("email", "name", "status")


class UserService:
    """Business logic and persistence for users."""

    def __init__(self, db: Session):
        self.db = db

    def list_users(self) -> List[User]:
        """All users, newest first."""
        return self.db.query(User).order_by(User.created_at.desc(), User.id).all()

    def get_user(self, user_id: UUID) -> User:
        """
        Get a single user by ID.

        Raises:
            NotFoundError: If the user does not exist
        """
        user = self.db.get(User, user_id)
        if not user:
            raise NotFoundError(f"User with ID {user_id} not found")
        return user

    def get_current_user(self, user_id: UUID) -> User:
        # The self view drops password and deleted_at at the schema level
        return self.get_user(user_id)

    def find_by_email(self, email: str) -> Optional[User]:
        return self.db.query(User).filter(User.email == email).first()

    def create_user(self, email: str, password: str, name: Optional[str] = None) -> User:
        """
        Create a new user.

        Raises:
            ConflictError: If the email is already registered
        """
        if self.find_by_email(email):
            raise ConflictError(f"User with email {email} already exists")

        user = User(email=email, password=get_password_hash(password), name=name)
        self.db.add(user)
        try:
            self.db.commit()
        except IntegrityError:
            # Lost a race with a concurrent registration of the same email
            self.db.rollback()
            raise ConflictError(f"User with email {email} already exists")
        self.db.refresh(user)

        logger.info(f"Created user {user.id}")
        return user

    def update_user(self, user_id: UUID, data: Dict[str, Any]) -> User:
        """
        Apply a partial update.

        Raises:
            NotFoundError: If the user does not exist
            ConflictError: If the new email belongs to another user
        """
        user = self.get_user(user_id)

        email = data.get("email")
        if email:
            existing = self.find_by_email(email)
            if existing and existing.id != user.id:
                raise ConflictError(f"Email {email} is already taken")

        for field, value in data.items():
            if field not in UPDATABLE_FIELDS or value is None:
                continue
            if hasattr(value, "value"):
                value = value.value
            setattr(user, field, value)

        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise ConflictError(f"Email {email} is already taken")
        self.db.refresh(user)

        logger.info(f"Updated user {user.id}")
        return user

    def update_profile(self, user_id: UUID, name: str) -> User:
        """Self-service update; only the name can change."""
        user = self.get_user(user_id)
        user.name = name
        self.db.commit()
        self.db.refresh(user)
        return user

    def change_password(self, user_id: UUID, current_password: str, new_password: str) -> None:
        """
        Replace the password after checking the current one.

        Bumps the user's token version so that tokens issued before the
        change no longer authenticate.

        Raises:
            NotFoundError: If the user does not exist
            ValidationError: If the current password is wrong or the new one
                is the same as the current one
        """
        user = self.get_user(user_id)

        if not verify_password(current_password, user.password):
            logger.warning(f"Password change rejected for user {user.id}: wrong current password")
            raise ValidationError("Current password is incorrect")

        if verify_password(new_password, user.password):
            raise ValidationError("New password must be different from the current password")

        user.password = get_password_hash(new_password)
        user.token_version = (user.token_version or 0) + 1
        self.db.commit()

        logger.info(f"Password changed for user {user.id}")

    def delete_user(self, user_id: UUID) -> None:
        """
        Permanently delete a user, along with the projects they own.

        Raises:
            NotFoundError: If the user does not exist
        """
        user = self.get_user(user_id)
        self.db.delete(user)
        self.db.commit()

        logger.info(f"Deleted user {user_id}")
