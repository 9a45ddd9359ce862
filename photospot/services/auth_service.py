"""Authentication provider: password checks, token issue and viewer resolution.

Resolution never fails the request. A missing, malformed or expired token
degrades to an anonymous viewer.
"""
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

import bcrypt
import jwt

from photospot.config import settings
from photospot.models.enums import UserRole

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Identified:
    viewer_id: str
    role: UserRole | None = None


@dataclass(frozen=True)
class Anonymous:
    pass


Viewer = Identified | Anonymous

ANONYMOUS = Anonymous()


# --- Passwords ---

def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode(), bcrypt.gensalt()).decode()


def verify_password(password: str, hashed: str) -> bool:
    return bcrypt.checkpw(password.encode(), hashed.encode())


# --- Tokens ---

def create_access_token(user_id: str, role: str, expires_in: timedelta | None = None) -> str:
    expire = datetime.now(timezone.utc) + (
        expires_in or timedelta(minutes=settings.access_token_expire_minutes)
    )
    payload = {"sub": user_id, "role": role, "exp": expire, "type": "access"}
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_token(token: str) -> dict:
    """Decode and validate a JWT. Raises jwt.PyJWTError on failure."""
    return jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])


def resolve_viewer(token: str | None) -> Viewer:
    if not token:
        return ANONYMOUS
    try:
        payload = decode_token(token)
    except jwt.PyJWTError as e:
        logger.debug("Treating request as anonymous, token rejected: %s", e)
        return ANONYMOUS

    subject = payload.get("sub")
    if payload.get("type") != "access" or not isinstance(subject, str) or not subject:
        logger.debug("Treating request as anonymous, unexpected token claims")
        return ANONYMOUS

    try:
        role = UserRole(payload["role"]) if payload.get("role") else None
    except ValueError:
        role = None
    return Identified(viewer_id=subject, role=role)
