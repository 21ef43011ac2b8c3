"""Pytest configuration and fixtures for bookshelf.

Environment is set before any bookshelf import so Settings validates.
DB-backed fixtures use a file-based SQLite database per test (aiosqlite,
NullPool): every session gets its own connection, which keeps read and
write sessions isolated the same way they are against Postgres.
"""

import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("SECRET_KEY", "test-secret-key-not-for-production")
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["TELEMETRY_ENABLED"] = "false"

import pytest  # noqa: E402
from fastapi import FastAPI  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import (  # noqa: E402
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import NullPool  # noqa: E402

from bookshelf.core.config import get_settings  # noqa: E402

get_settings.cache_clear()

from bookshelf.application.dtos.user import UserResult  # noqa: E402
from bookshelf.application.services.audit_policy import AuditPolicyRegistry  # noqa: E402
from bookshelf.core.audit_config import build_audit_registry  # noqa: E402
from bookshelf.infrastructure.persistence import models  # noqa: E402,F401
from bookshelf.infrastructure.persistence.database import (  # noqa: E402
    Base,
    get_db,
    get_db_transactional,
)
from bookshelf.infrastructure.persistence.repositories import UserRepository  # noqa: E402
from bookshelf.main import create_app  # noqa: E402
from bookshelf.shared.enums import UserRole  # noqa: E402

ADMIN_API_KEY = "test-admin-api-key"
REVIEWER_API_KEY = "test-reviewer-api-key"
ADMIN_EMAIL = "admin@bookpub.com"
ADMIN_PASSWORD = "admin123"
REVIEWER_EMAIL = "reviewer@bookpub.com"
REVIEWER_PASSWORD = "reviewer123"


@pytest.fixture
def audit_registry() -> AuditPolicyRegistry:
    """Registry built from the application's audit config."""
    return build_audit_registry()


@pytest.fixture
async def engine(tmp_path) -> AsyncEngine:
    """Fresh SQLite database with the full schema."""
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'bookshelf-test.db'}",
        poolclass=NullPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


@pytest.fixture
async def db_session(session_factory: async_sessionmaker[AsyncSession]) -> AsyncSession:
    """Database session for repository/integration tests. Rolls back after test."""
    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest.fixture
def app(session_factory: async_sessionmaker[AsyncSession]) -> FastAPI:
    """Application with DB dependencies pointed at the per-test database."""
    application = create_app()

    async def _get_db():
        async with session_factory() as session:
            yield session

    async def _get_db_transactional():
        async with session_factory() as session:
            async with session.begin():
                yield session

    application.dependency_overrides[get_db] = _get_db
    application.dependency_overrides[get_db_transactional] = _get_db_transactional
    return application


@pytest.fixture
async def client(app: FastAPI) -> AsyncClient:
    """Async HTTP client against the FastAPI app (ASGI)."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
async def users(
    session_factory: async_sessionmaker[AsyncSession],
) -> dict[str, UserResult]:
    """Committed admin and reviewer users with known passwords and API keys."""
    async with session_factory() as session:
        async with session.begin():
            repo = UserRepository(session)
            admin = await repo.create_user(
                "Admin User", ADMIN_EMAIL, ADMIN_PASSWORD, UserRole.ADMIN, api_key=ADMIN_API_KEY
            )
            reviewer = await repo.create_user(
                "Reviewer User",
                REVIEWER_EMAIL,
                REVIEWER_PASSWORD,
                UserRole.REVIEWER,
                api_key=REVIEWER_API_KEY,
            )
    return {"admin": admin, "reviewer": reviewer}


@pytest.fixture
def admin_headers(users: dict[str, UserResult]) -> dict[str, str]:
    return {"X-API-Key": ADMIN_API_KEY}


@pytest.fixture
def reviewer_headers(users: dict[str, UserResult]) -> dict[str, str]:
    return {"X-API-Key": REVIEWER_API_KEY}
