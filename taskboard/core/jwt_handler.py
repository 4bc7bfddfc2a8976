import re
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional
from jose import jwt, JWTError

from .config import settings
from .exceptions import UnauthorizedError

DEFAULT_EXPIRY = timedelta(days=7)

_EXPIRES_IN_RE = re.compile(r"^\s*(\d+)\s*([dhm])\s*$")
_UNITS = {"d": "days", "h": "hours", "m": "minutes"}


def parse_expires_in(value: Optional[str]) -> timedelta:
    """Turn an expiry string such as ``7d``, ``24h`` or ``30m`` into a timedelta.

    Anything unparseable falls back to seven days.
    """
    match = _EXPIRES_IN_RE.match(value or "")
    if not match:
        return DEFAULT_EXPIRY
    amount, unit = match.groups()
    return timedelta(**{_UNITS[unit]: int(amount)})


def create_access_token(user_id: str, email: str, token_version: int = 0,
                        expires_delta: Optional[timedelta] = None) -> str:
    expire = datetime.now(timezone.utc) + (expires_delta or parse_expires_in(settings.jwt_expires_in))
    payload = {
        "sub": str(user_id),
        "email": email,
        "ver": token_version,
        "exp": expire,
    }
    return jwt.encode(payload, settings.secret_key, algorithm=settings.algorithm)


def decode_access_token(token: str) -> Dict[str, Any]:
    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
    except JWTError:
        raise UnauthorizedError("Invalid or expired token")
    if not payload.get("sub"):
        raise UnauthorizedError("Invalid or expired token")
    return payload


def cookie_options() -> Dict[str, Any]:
    """Attributes shared by the auth cookie on login and logout."""
    return {
        "httponly": True,
        "secure": settings.is_production,
        "samesite": "lax",
        "path": "/",
    }
