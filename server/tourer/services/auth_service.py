"""Account service: registration, login and token issuance."""

import logging
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.exceptions import AuthenticationError, BadRequestError, NotFoundError
from ..core.security import (
    ACCESS_TOKEN,
    REFRESH_TOKEN,
    CurrentUser,
    create_token,
    hash_password,
    verify_password,
)
from ..models.user import AuthProvider, User, UserRole
from ..schemas.user import (
    AccessTokenResponse,
    LoginRequest,
    RegisterRequest,
    TokenResponse,
    UserSummary,
)

logger = logging.getLogger(__name__)


class AuthService:
    """Service for account-related operations."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def register(self, request: RegisterRequest) -> TokenResponse:
        """
        Register a local account and sign the new user in.

        Args:
            request: Email, password and names

        Returns:
            Access and refresh tokens with the user summary

        Raises:
            BadRequestError: If the email is already registered
        """
        email = request.email.lower()
        if await self.get_user_by_email(email):
            logger.warning("Registration failed - email already registered", extra={"email": email})
            raise BadRequestError(detail="A user with this email already exists")

        user = User(
            email=email,
            password_hash=hash_password(request.password),
            first_name=request.first_name,
            last_name=request.last_name,
            provider=AuthProvider.LOCAL,
            role=UserRole.USER,
        )

        try:
            self.db.add(user)
            await self.db.commit()
            await self.db.refresh(user)
        except IntegrityError as e:
            await self.db.rollback()
            logger.error(
                "Registration failed due to integrity constraint",
                extra={"email": email, "error": str(e)}
            )
            raise BadRequestError(detail="A user with this email already exists")

        logger.info("User registered", extra={"user_id": str(user.id)})

        return self._issue_tokens(user)

    async def login(self, request: LoginRequest) -> TokenResponse:
        """
        Authenticate with email and password.

        Raises:
            AuthenticationError: If the account is unknown, inactive, has no
                password or the password does not match
        """
        user = await self.get_user_by_email(request.email.lower())

        if user is None or not user.is_active or not user.password_hash:
            logger.warning("Login failed - unknown or unusable account", extra={"email": request.email})
            raise AuthenticationError(detail="Invalid email or password")

        if not verify_password(request.password, user.password_hash):
            logger.warning("Login failed - wrong password", extra={"user_id": str(user.id)})
            raise AuthenticationError(detail="Invalid email or password")

        logger.info("User logged in", extra={"user_id": str(user.id)})

        return self._issue_tokens(user)

    def refresh(self, caller: CurrentUser) -> AccessTokenResponse:
        """Issue a new access token for a caller holding a valid refresh token."""
        return AccessTokenResponse(
            access_token=create_token(caller.id, caller.email, caller.role, ACCESS_TOKEN)
        )

    async def get_profile(self, caller: CurrentUser) -> User:
        user = await self.db.get(User, caller.id)
        if user is None:
            raise NotFoundError(resource_type="user", resource_id=str(caller.id))
        return user

    async def get_user_by_email(self, email: str) -> Optional[User]:
        stmt = select(User).where(func.lower(User.email) == email.lower())
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    def _issue_tokens(self, user: User) -> TokenResponse:
        return TokenResponse(
            access_token=create_token(user.id, user.email, user.role, ACCESS_TOKEN),
            refresh_token=create_token(user.id, user.email, user.role, REFRESH_TOKEN),
            user=UserSummary.model_validate(user),
        )
