"""Password hashing, bearer token helpers and caller identity."""

from datetime import datetime, timedelta, timezone
from typing import Any
from uuid import UUID

import jwt
from jwt import ExpiredSignatureError, PyJWTError
from passlib.context import CryptContext
from pydantic import BaseModel

from ..models.user import UserRole
from .config import settings
from .exceptions import AuthenticationError, AuthorizationError

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")

ACCESS_TOKEN = "access"
REFRESH_TOKEN = "refresh"


class CurrentUser(BaseModel):
    """The authenticated caller, passed explicitly into service operations."""

    id: UUID
    email: str
    role: UserRole

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    return pwd_context.verify(password, password_hash)


def create_token(
    user_id: UUID,
    email: str,
    role: str,
    token_type: str = ACCESS_TOKEN,
    expires_delta: timedelta | None = None,
) -> str:
    """
    Sign a bearer token for a user.

    Args:
        user_id: Subject of the token
        email: User email embedded for convenience
        role: User role embedded in the payload
        token_type: "access" or "refresh"
        expires_delta: Lifetime override; defaults come from settings

    Returns:
        Encoded JWT
    """
    if expires_delta is None:
        if token_type == REFRESH_TOKEN:
            expires_delta = timedelta(days=settings.refresh_token_expire_days)
        else:
            expires_delta = timedelta(minutes=settings.access_token_expire_minutes)

    now = datetime.now(timezone.utc)
    payload = {
        "sub": str(user_id),
        "email": email,
        "role": str(role.value if isinstance(role, UserRole) else role),
        "type": token_type,
        "iat": now,
        "exp": now + expires_delta,
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_token(token: str) -> dict[str, Any]:
    """
    Verify a bearer token and return its payload.

    Raises:
        AuthenticationError: If the token is expired, malformed or has no subject
    """
    try:
        payload = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except ExpiredSignatureError:
        raise AuthenticationError(detail="Token has expired")
    except PyJWTError as e:
        raise AuthenticationError(detail=f"Token validation failed: {e}")

    if not payload.get("sub"):
        raise AuthenticationError(detail="Invalid token payload")

    return payload


def require_admin(caller: CurrentUser) -> None:
    """Raise AuthorizationError unless the caller is an administrator."""
    if not caller.is_admin:
        raise AuthorizationError(
            detail="Administrator role required",
            required_role=UserRole.ADMIN.value,
        )
