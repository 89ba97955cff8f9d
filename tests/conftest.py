"""Test configuration and fixtures for the chef marketplace."""

import os
import tempfile

# Must be set before chefbook.config is imported anywhere
_DB_DIR = tempfile.mkdtemp(prefix="chefbook-tests-")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_DB_DIR}/app.db"
os.environ["RESET_DB"] = "true"
os.environ["BOOKING_AUTO_COMPLETE"] = "false"
os.environ["STRICT_BOOKING_TRANSITIONS"] = "false"
os.environ["SECRET_KEY"] = "test-secret"
os.environ["LOG_LEVEL"] = "WARNING"

from collections.abc import AsyncGenerator, Awaitable, Callable, Generator  # noqa: E402
from datetime import datetime, timedelta, timezone  # noqa: E402

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine  # noqa: E402

from chefbook.models import Base, Booking, BookingStatus, ChefProfile, User, UserRole  # noqa: E402


@pytest_asyncio.fixture
async def session_factory(tmp_path) -> AsyncGenerator[async_sessionmaker[AsyncSession]]:
    """Fresh SQLite database per test, independent of the app's global engine."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path}/service.db")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)
    await engine.dispose()


@pytest_asyncio.fixture
async def db(session_factory) -> AsyncGenerator[AsyncSession]:
    async with session_factory() as session:
        yield session


@pytest.fixture
def make_user(db: AsyncSession) -> Callable[..., Awaitable[User]]:
    async def _make(name: str, role: UserRole = UserRole.CUSTOMER) -> User:
        user = User(email=f"{name}@example.com", hashed_password="not-used", name=name, role=role)
        db.add(user)
        await db.flush()
        return user

    return _make


@pytest.fixture
def make_chef(db: AsyncSession, make_user) -> Callable[..., Awaitable[tuple[User, ChefProfile]]]:
    async def _make(name: str, hourly_rate: float = 50.0) -> tuple[User, ChefProfile]:
        user = await make_user(name, UserRole.CHEF)
        chef = ChefProfile(
            user_id=user.id,
            specialties=["italian"],
            experience_years=5,
            hourly_rate=hourly_rate,
            bio="Test chef",
            available_dates=[],
            rating=0.0,
        )
        db.add(chef)
        await db.flush()
        return user, chef

    return _make


@pytest.fixture
def make_booking(db: AsyncSession) -> Callable[..., Awaitable[Booking]]:
    """Insert a booking directly in a given status (bypasses the store's role rules)."""

    async def _make(
        customer: User,
        chef: ChefProfile,
        status: BookingStatus = BookingStatus.PENDING,
        *,
        duration: int = 3,
        date: datetime | None = None,
    ) -> Booking:
        booking = Booking(
            customer_id=customer.id,
            chef_id=chef.id,
            date=date or datetime.now(timezone.utc) + timedelta(days=7),
            duration=duration,
            location="12 Test Street",
            status=status,
            total_price=chef.hourly_rate * duration,
        )
        db.add(booking)
        await db.flush()
        return booking

    return _make


@pytest_asyncio.fixture
async def customer(make_user) -> User:
    return await make_user("alice")


@pytest_asyncio.fixture
async def other_customer(make_user) -> User:
    return await make_user("bob")


@pytest_asyncio.fixture
async def chef(make_chef) -> tuple[User, ChefProfile]:
    return await make_chef("gordon", 50.0)


@pytest_asyncio.fixture
async def other_chef(make_chef) -> tuple[User, ChefProfile]:
    return await make_chef("julia", 80.0)


@pytest.fixture
def client() -> Generator[TestClient]:
    """App client; the lifespan drops and recreates all tables on enter."""
    from chefbook.main import app

    with TestClient(app) as test_client:
        yield test_client
