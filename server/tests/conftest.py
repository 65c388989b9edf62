"""Test configuration and fixtures."""

import os

# Must be set before tourer.core.config is imported
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("JWT_SECRET", "test-secret")

from datetime import date  # noqa: E402

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from tourer.core.database import Base, get_db  # noqa: E402
from tourer.core.security import CurrentUser, create_token, hash_password  # noqa: E402
from tourer.models import *  # noqa: E402,F403 - Import all models
from tourer.models.user import User, UserRole  # noqa: E402
from tourer.schemas.booking import CreateBookingRequest  # noqa: E402
from tourer.schemas.package import CreatePackageRequest  # noqa: E402
from tourer.services.booking_service import BookingService  # noqa: E402
from tourer.services.package_service import PackageService  # noqa: E402

# Test database URL (in-memory SQLite for speed)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

TEST_PASSWORD = "correct-horse-battery"


@pytest_asyncio.fixture(scope="function")
async def test_engine():
    """Create a test database engine."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    # Create tables
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    # Drop tables
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def test_session(test_engine):
    """Create a test database session."""
    async_session = async_sessionmaker(
        test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )

    async with async_session() as session:
        yield session


@pytest_asyncio.fixture(scope="function")
async def test_app(test_session):
    """Create the application with the database dependency bound to the test session."""
    from tourer.main import create_app

    app = create_app()

    # Override database dependency
    async def override_get_db():
        yield test_session

    app.dependency_overrides[get_db] = override_get_db

    yield app

    # Clean up
    app.dependency_overrides.clear()


@pytest_asyncio.fixture(scope="function")
async def test_client(test_app):
    """Create a test HTTP client."""
    transport = ASGITransport(app=test_app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


async def _create_user(session, email: str, role: UserRole, **fields) -> User:
    user = User(
        email=email,
        password_hash=hash_password(TEST_PASSWORD),
        first_name=fields.pop("first_name", "Test"),
        last_name=fields.pop("last_name", "User"),
        role=role,
        **fields,
    )
    session.add(user)
    await session.commit()
    await session.refresh(user)
    return user


def _caller(user: User) -> CurrentUser:
    return CurrentUser(id=user.id, email=user.email, role=UserRole(user.role))


def _headers(user: User) -> dict:
    return {"Authorization": f"Bearer {create_token(user.id, user.email, user.role)}"}


@pytest_asyncio.fixture
async def admin_user(test_session) -> User:
    return await _create_user(
        test_session, "admin@example.com", UserRole.ADMIN, first_name="Ada", last_name="Admin"
    )


@pytest_asyncio.fixture
async def regular_user(test_session) -> User:
    return await _create_user(
        test_session, "jane@example.com", UserRole.USER, first_name="Jane", last_name="Traveller"
    )


@pytest_asyncio.fixture
async def other_user(test_session) -> User:
    return await _create_user(
        test_session, "omar@example.com", UserRole.USER, first_name="Omar", last_name="Other"
    )


@pytest.fixture
def admin_caller(admin_user) -> CurrentUser:
    return _caller(admin_user)


@pytest.fixture
def user_caller(regular_user) -> CurrentUser:
    return _caller(regular_user)


@pytest.fixture
def other_caller(other_user) -> CurrentUser:
    return _caller(other_user)


@pytest.fixture
def admin_headers(admin_user) -> dict:
    return _headers(admin_user)


@pytest.fixture
def user_headers(regular_user) -> dict:
    return _headers(regular_user)


@pytest.fixture
def other_headers(other_user) -> dict:
    return _headers(other_user)


@pytest.fixture
def sample_package_data():
    """Sample package data for testing."""
    return {
        "title": "City Tour!!",
        "description": "A walking tour of the old town",
        "short_description": "Old town walk",
        "price": "100.00",
        "duration": 5,
        "location_name": "Lisbon",
        "country": "Portugal",
        "category": "CITY",
        "difficulty": "EASY",
        "highlights": ["Alfama", "Tram 28"],
        "itinerary": [
            {"day": 1, "title": "Arrival", "activities": ["Check-in"]},
            {"day": 2, "title": "Old town", "activities": ["Walking tour"], "meals": ["Lunch"]},
        ],
    }


@pytest_asyncio.fixture
async def sample_package(test_session, admin_caller, sample_package_data):
    """A persisted active package priced at 100.00 for 5 days."""
    return await PackageService(test_session).create_package(
        CreatePackageRequest(**sample_package_data), admin_caller
    )


@pytest.fixture
def make_booking(test_session, sample_package):
    """Factory creating a booking of the sample package for a caller."""

    async def _make(caller: CurrentUser, guests: int = 2, **fields):
        request = CreateBookingRequest(
            package_id=fields.pop("package_id", sample_package.id),
            start_date=fields.pop("start_date", date(2024, 1, 10)),
            guests=guests,
            guest_names=fields.pop("guest_names", [f"Guest {i}" for i in range(guests)]),
            **fields,
        )
        return await BookingService(test_session).create_booking(request, caller)

    return _make


