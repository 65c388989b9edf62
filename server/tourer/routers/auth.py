"""Authentication router for account operations."""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.database import get_db
from ..core.dependencies import RefreshAuth, RequiredAuth
from ..core.security import CurrentUser
from ..schemas.user import (
    AccessTokenResponse,
    LoginRequest,
    RegisterRequest,
    TokenResponse,
    UserProfile,
)
from ..services.auth_service import AuthService

router = APIRouter(prefix="/auth", tags=["auth"])

DB_DEPENDENCY = Depends(get_db)


@router.post("/register", response_model=TokenResponse, status_code=status.HTTP_201_CREATED)
async def register(request: RegisterRequest, db: AsyncSession = DB_DEPENDENCY) -> TokenResponse:
    """Create a local account and return access and refresh tokens."""
    return await AuthService(db).register(request)


@router.post("/login", response_model=TokenResponse)
async def login(request: LoginRequest, db: AsyncSession = DB_DEPENDENCY) -> TokenResponse:
    return await AuthService(db).login(request)


@router.post("/refresh", response_model=AccessTokenResponse)
async def refresh(
    caller: CurrentUser = RefreshAuth,
    db: AsyncSession = DB_DEPENDENCY,
) -> AccessTokenResponse:
    """Exchange a refresh token (sent as the bearer token) for a new access token."""
    return AuthService(db).refresh(caller)


@router.get("/profile", response_model=UserProfile)
async def profile(
    caller: CurrentUser = RequiredAuth,
    db: AsyncSession = DB_DEPENDENCY,
) -> UserProfile:
    user = await AuthService(db).get_profile(caller)
    return UserProfile.model_validate(user)
