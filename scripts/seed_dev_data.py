"""Seed dev data: an admin and a reviewer user plus three sample books.

Idempotent: does nothing when admin@bookpub.com already exists. Books are
created inside a request scope acting as the admin, so their create entries
appear in the audit trail like any API-created book.

Usage:
    python -m scripts.seed_dev_data

Requires: DATABASE_URL, SECRET_KEY (from env or .env) and a migrated
database (alembic upgrade head). Prints the generated API keys once.
"""

from __future__ import annotations

import asyncio
from pathlib import Path

from dotenv import load_dotenv

from bookshelf.application.dtos.book import BookCreate
from bookshelf.application.services.audit_trail_service import AuditTrailService
from bookshelf.core.audit_config import build_audit_registry
from bookshelf.infrastructure.persistence.database import dispose_engine, get_session_factory
from bookshelf.infrastructure.persistence.repositories import (
    AuditLogRepository,
    BookRepository,
    UserRepository,
)
from bookshelf.shared.context import request_scope
from bookshelf.shared.enums import UserRole
from bookshelf.shared.utils.generators import generate_api_key

ADMIN_EMAIL = "admin@bookpub.com"
REVIEWER_EMAIL = "reviewer@bookpub.com"

SAMPLE_BOOKS: list[tuple[str, BookCreate]] = [
    ("admin", BookCreate("Why This Code Works", "Ankit Verma", "Penguin")),
    (
        "admin",
        BookCreate("Fixing Bugs by Adding More Bugs", "Sharma Ji", "Panic Mode Publishing"),
    ),
    (
        "reviewer",
        BookCreate("How to Eat Almonds and Remember Syntax", "Varun Kumar", "Penguin"),
    ),
]


def _project_root() -> Path:
    return Path(__file__).resolve().parent.parent


def _load_env() -> None:
    """Load .env from project root so get_settings() sees DATABASE_URL when run as script."""
    load_dotenv(_project_root() / ".env", override=True)


async def seed() -> None:
    session_factory = get_session_factory()
    registry = build_audit_registry()
    async with session_factory() as session:
        async with session.begin():
            user_repo = UserRepository(session)
            if await user_repo.get_by_email(ADMIN_EMAIL) is not None:
                print("Database already seeded.")
                return

            admin_key = generate_api_key()
            reviewer_key = generate_api_key()
            admin = await user_repo.create_user(
                "Admin User", ADMIN_EMAIL, "admin123", UserRole.ADMIN, api_key=admin_key
            )
            reviewer = await user_repo.create_user(
                "Reviewer User",
                REVIEWER_EMAIL,
                "reviewer123",
                UserRole.REVIEWER,
                api_key=reviewer_key,
            )
            owners = {"admin": admin.id, "reviewer": reviewer.id}

            audit_trail = AuditTrailService(AuditLogRepository(session), registry)
            book_repo = BookRepository(session, audit_trail)
            for owner, data in SAMPLE_BOOKS:
                with request_scope("seed-dev-data", actor_id=owners[owner]):
                    await book_repo.create_book(data, owners[owner])

    print(f"Created {ADMIN_EMAIL} (password admin123), API key: {admin_key}")
    print(f"Created {REVIEWER_EMAIL} (password reviewer123), API key: {reviewer_key}")
    print(f"Created {len(SAMPLE_BOOKS)} books.")


async def main() -> None:
    try:
        await seed()
    finally:
        await dispose_engine()


if __name__ == "__main__":
    _load_env()
    asyncio.run(main())
