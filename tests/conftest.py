"""Shared test fixtures.

Settings are read at import time, so the environment is prepared before any
``app`` module is imported.
"""

import os

os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["JWT_SECRET"] = "test-access-secret"
os.environ["JWT_REFRESH_SECRET"] = "test-refresh-secret"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["LOG_FORMAT"] = "console"
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["GOOGLE_CLIENT_ID"] = "test-client-id.apps.googleusercontent.com"
os.environ["RESEND_API_KEY"] = ""
os.environ["SENTRY_DSN"] = ""
os.environ["DEBUG"] = "false"

from typing import AsyncGenerator, Dict, List, Tuple  # noqa: E402

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy import update  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from app import models  # noqa: E402,F401
from app.api.v1 import auth as auth_endpoints  # noqa: E402
from app.db.base import Base  # noqa: E402
from app.db.session import get_db  # noqa: E402
from app.main import app  # noqa: E402
from app.models.user import User  # noqa: E402

PASSWORD = "Str0ng!pass"


class RecordingEmailService:
    """Stands in for the Resend client and keeps every code it was asked to send."""

    def __init__(self):
        self.verification: List[Tuple[str, str]] = []
        self.password_reset: List[Tuple[str, str]] = []

    async def send_verification_email(self, to: str, code: str) -> bool:
        self.verification.append((to, code))
        return True

    async def send_password_reset_email(self, to: str, code: str) -> bool:
        self.password_reset.append((to, code))
        return True


@pytest_asyncio.fixture
async def session_factory() -> AsyncGenerator[async_sessionmaker, None]:
    """Fresh in-memory database per test, shared by every session on one connection."""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)

    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


@pytest.fixture
def email_outbox(monkeypatch) -> RecordingEmailService:
    outbox = RecordingEmailService()
    monkeypatch.setattr(auth_endpoints, "email_service", outbox)
    return outbox


@pytest_asyncio.fixture
async def client(session_factory, email_outbox) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client against the app with the test database injected."""

    async def override_get_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
def register_user(client):
    """Register through the API and return the response body."""

    async def _register(email: str = "student@example.com", password: str = PASSWORD, **extra) -> Dict:
        response = await client.post(
            "/api/auth/register",
            json={"email": email, "password": password, **extra},
        )
        assert response.status_code == 201, response.text
        return response.json()

    return _register


@pytest.fixture
def set_user_flags(session_factory):
    """Flip moderation flags directly in the database."""

    async def _set(email: str, **values) -> None:
        async with session_factory() as session:
            await session.execute(update(User).where(User.email == email).values(**values))
            await session.commit()

    return _set


def bearer(token: str) -> Dict[str, str]:
    return {"Authorization": f"Bearer {token}"}
