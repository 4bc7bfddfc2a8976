"""
Authentication module for Taskboard.

Resolves the caller from the auth cookie (or a Bearer header) and checks
the token against the current state of the account.
"""
import logging
from typing import Optional
from uuid import UUID
from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from .config import settings
from .database import get_db
from .exceptions import UnauthorizedError
from .jwt_handler import decode_access_token
from ..models import User

logger = logging.getLogger(__name__)

# Security scheme; the cookie is the primary transport
security = HTTPBearer(
    scheme_name="Bearer Token",
    description="JWT issued by /api/auth/login",
    auto_error=False,
)


class CurrentUser:
    """Represents the current authenticated user."""

    def __init__(self, id: UUID, email: str):
        self.id = id
        self.email = email

    def __str__(self):
        return f"User(id={self.id}, email={self.email})"

    def __repr__(self):
        return self.__str__()


def extract_token(request: Request, credentials: Optional[HTTPAuthorizationCredentials]) -> Optional[str]:
    token = request.cookies.get(settings.cookie_name)
    if token:
        return token
    if credentials and credentials.credentials:
        return credentials.credentials
    return None


def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_db),
) -> CurrentUser:
    """
    Dependency to get current authenticated user.

    Raises:
        UnauthorizedError: If the token is missing, invalid or stale, or the
            account no longer exists
    """
    token = extract_token(request, credentials)
    if not token:
        raise UnauthorizedError("Authentication required")

    payload = decode_access_token(token)

    try:
        user_id = UUID(payload["sub"])
    except ValueError:
        raise UnauthorizedError("Invalid or expired token") from None

    user = db.get(User, user_id)
    if user is None or user.deleted_at is not None:
        logger.warning(f"Token presented for missing or deleted user {user_id}")
        raise UnauthorizedError("User no longer exists")

    if payload.get("ver", 0) != user.token_version:
        logger.info(f"Rejected stale token for user {user_id}")
        raise UnauthorizedError("Token has been revoked, please log in again")

    return CurrentUser(id=user.id, email=user.email)
