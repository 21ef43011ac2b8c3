"""Repository interfaces (ports) for the application layer.

Protocols define contracts that infrastructure implementations must fulfill (DIP).
All types reference application DTOs only; no infrastructure imports.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from bookshelf.application.dtos.audit_log import (
        AuditLogEntryCreate,
        AuditLogFilter,
        AuditLogResult,
    )
    from bookshelf.application.dtos.book import BookCreate, BookResult
    from bookshelf.application.dtos.user import UserResult
    from bookshelf.shared.enums import UserRole
    from bookshelf.shared.pagination import CursorData, PaginatedResult


class IAuditLogRepository(Protocol):
    """Protocol for the append-only audit log store."""

    async def create(self, entry: AuditLogEntryCreate) -> AuditLogResult:
        """Append one entry with a fresh id and the current timestamp."""

    async def get_by_id(self, audit_id: str) -> AuditLogResult | None:
        """Return one entry by id."""

    async def list(
        self,
        filters: AuditLogFilter,
        *,
        limit: int,
        cursor: CursorData | None = None,
    ) -> PaginatedResult[AuditLogResult]:
        """Return one page of matching entries, newest first (timestamp, id)."""


class IBookRepository(Protocol):
    """Protocol for book persistence. Mutations record their own audit entries."""

    async def get_by_id(
        self, book_id: str, *, include_deleted: bool = False
    ) -> BookResult | None:
        """Return book by id; soft-deleted books only when include_deleted."""

    async def list_books(
        self,
        *,
        limit: int,
        cursor: CursorData | None = None,
        include_deleted: bool = False,
    ) -> PaginatedResult[BookResult]:
        """Return one page of books, newest first (created_at, id)."""

    async def create_book(self, data: BookCreate, actor_id: str) -> BookResult:
        """Insert a book created by actor_id."""

    async def update_book(
        self, book_id: str, changes: dict[str, Any], actor_id: str
    ) -> BookResult:
        """Apply changes and set updated_by_id."""

    async def soft_delete(self, book_id: str, actor_id: str) -> BookResult:
        """Set is_deleted."""

    async def restore(self, book_id: str, actor_id: str) -> BookResult:
        """Clear is_deleted."""


class IUserRepository(Protocol):
    """Protocol for user lookup and credential checks."""

    async def get_by_id(self, user_id: str) -> UserResult | None:
        """Return user by id."""

    async def get_by_api_key(self, api_key: str) -> UserResult | None:
        """Return the user owning api_key (compared by hash)."""

    async def authenticate(self, email: str, password: str) -> UserResult | None:
        """Return the user if email/password match, else None."""

    async def create_user(
        self,
        name: str,
        email: str,
        password: str,
        role: UserRole,
        api_key: str | None = None,
    ) -> UserResult:
        """Create a user; password and api_key are stored hashed."""
