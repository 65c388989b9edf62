"""FastAPI dependencies for database sessions and authentication."""

from typing import Optional
from uuid import UUID

from fastapi import Depends, Header
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..models.user import User, UserRole
from .database import get_db
from .exceptions import AuthenticationError
from .security import ACCESS_TOKEN, REFRESH_TOKEN, CurrentUser, decode_token


def _extract_bearer_token(authorization: Optional[str]) -> str:
    if not authorization:
        raise AuthenticationError(detail="Authorization header missing")

    try:
        scheme, token = authorization.split()
    except ValueError:
        raise AuthenticationError(detail="Invalid authorization header format")

    if scheme.lower() != "bearer":
        raise AuthenticationError(detail="Invalid authentication scheme")

    return token


async def _authenticate(
    authorization: Optional[str],
    db: AsyncSession,
    token_type: str,
) -> CurrentUser:
    payload = decode_token(_extract_bearer_token(authorization))

    if payload.get("type", ACCESS_TOKEN) != token_type:
        raise AuthenticationError(detail=f"{token_type.capitalize()} token required")

    try:
        user_id = UUID(payload["sub"])
    except ValueError:
        raise AuthenticationError(detail="Invalid token subject")

    result = await db.execute(select(User).where(User.id == user_id))
    user = result.scalar_one_or_none()

    if user is None:
        raise AuthenticationError(detail="User not found")
    if not user.is_active:
        raise AuthenticationError(detail="Account is deactivated")

    # Role comes from the stored user so demotions apply immediately
    return CurrentUser(id=user.id, email=user.email, role=UserRole(user.role))


async def get_current_user(
    authorization: Optional[str] = Header(None, alias="Authorization"),
    db: AsyncSession = Depends(get_db),
) -> CurrentUser:
    """
    Authentication dependency that validates bearer access tokens.

    Args:
        authorization: Authorization header with Bearer token
        db: Database session

    Returns:
        CurrentUser: The authenticated caller

    Raises:
        AuthenticationError: If the token is missing, invalid or expired, or
            the account is unknown or deactivated
    """
    return await _authenticate(authorization, db, ACCESS_TOKEN)


async def get_refresh_user(
    authorization: Optional[str] = Header(None, alias="Authorization"),
    db: AsyncSession = Depends(get_db),
) -> CurrentUser:
    """Like get_current_user, but accepts only refresh tokens."""
    return await _authenticate(authorization, db, REFRESH_TOKEN)


RequiredAuth = Depends(get_current_user)
RefreshAuth = Depends(get_refresh_user)
