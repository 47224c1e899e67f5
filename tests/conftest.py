from typing import AsyncGenerator, Callable, Optional

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from libs.auth.dependencies import get_current_user, get_optional_user
from libs.auth.models import AuthUser
from libs.db.base import Base
from libs.db.session import get_async_db
from services.gateway_service.app.main import app

# Import all models so metadata includes every table
from services.analytics_service import models as _analytics_models  # noqa: F401
from services.events_service import models as _event_models  # noqa: F401
from services.members_service import models as _member_models  # noqa: F401
from services.subscribers_service import models as _subscriber_models  # noqa: F401


@pytest_asyncio.fixture
async def test_engine():
    """
    Fresh in-memory SQLite database per test.

    StaticPool keeps the single connection alive so every session sees the
    same memory database.
    """
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(test_engine) -> AsyncGenerator[AsyncSession, None]:
    session_factory = async_sessionmaker(
        bind=test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def client(db_session) -> AsyncGenerator[AsyncClient, None]:
    """
    Yield an AsyncClient with the app and overridden DB dependency.
    """
    app.dependency_overrides[get_async_db] = lambda: db_session

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test"
    ) as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
def member_user() -> AuthUser:
    return AuthUser(user_id="auth-member-1", email="member@example.com")


@pytest.fixture
def admin_user() -> AuthUser:
    return AuthUser(
        user_id="auth-admin-1",
        email="organiser@example.com",
        app_metadata={"role": "admin"},
    )


@pytest.fixture
def login() -> Callable[[Optional[AuthUser]], None]:
    """
    Sign a user in for subsequent requests by overriding the auth
    dependencies; ``login(None)`` signs out again.
    """

    def _login(user: Optional[AuthUser]) -> None:
        if user is None:
            app.dependency_overrides.pop(get_current_user, None)
            app.dependency_overrides.pop(get_optional_user, None)
            return
        app.dependency_overrides[get_current_user] = lambda: user
        app.dependency_overrides[get_optional_user] = lambda: user

    return _login
