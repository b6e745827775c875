from __future__ import annotations

import os

# Settings are cached on first import of the app; keep tests off Postgres and fast on bcrypt
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("JWT_SECRET", "test-secret-0123456789abcdef0123456789abcdef")

from collections.abc import AsyncIterator  # noqa: E402

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import (  # noqa: E402
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool  # noqa: E402
from src.api.deps import get_account_emails, get_db_session  # noqa: E402
from src.api.main import app  # noqa: E402
from src.infrastructure.db.base import Base  # noqa: E402
from src.infrastructure.db.models import UserModel, UserRole  # noqa: E402
from src.infrastructure.db.session import dispose_engine  # noqa: E402

from tests.utils import FakeAccountEmails, create_user  # noqa: E402


@pytest.fixture()
async def session_factory() -> AsyncIterator[async_sessionmaker[AsyncSession]]:
    # One shared connection so the audit recorder's side session sees the same database
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(engine, expire_on_commit=False)

    await engine.dispose()


@pytest.fixture()
async def db(session_factory: async_sessionmaker[AsyncSession]) -> AsyncIterator[AsyncSession]:
    """Provide a database session for tests that need direct DB access."""
    async with session_factory() as session:
        yield session


@pytest.fixture()
def mailer() -> FakeAccountEmails:
    return FakeAccountEmails()


@pytest.fixture()
async def async_client(
    session_factory: async_sessionmaker[AsyncSession],
    mailer: FakeAccountEmails,
) -> AsyncIterator[AsyncClient]:
    """Async HTTP client wired to the in-memory database."""

    async def override_db_session() -> AsyncIterator[AsyncSession]:
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db_session] = override_db_session
    app.dependency_overrides[get_account_emails] = lambda: mailer

    transport = ASGITransport(app=app)  # type: ignore
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    app.dependency_overrides.pop(get_db_session, None)
    app.dependency_overrides.pop(get_account_emails, None)
    # /health goes through the module-level engine; drop it with this test's loop
    await dispose_engine()


@pytest.fixture()
async def superadmin(db: AsyncSession) -> UserModel:
    return await create_user(
        db,
        email="owner@example.com",
        first_name="Olivia",
        last_name="Owner",
        role=UserRole.SUPERADMIN,
    )


@pytest.fixture()
async def admin(db: AsyncSession) -> UserModel:
    return await create_user(
        db,
        email="admin@example.com",
        first_name="Adam",
        last_name="Admin",
        role=UserRole.ADMIN,
    )


@pytest.fixture()
async def recruiter(db: AsyncSession) -> UserModel:
    return await create_user(
        db,
        email="rita@example.com",
        first_name="Rita",
        last_name="Recruiter",
        role=UserRole.RECRUITER,
        commission_rate="100",
    )
