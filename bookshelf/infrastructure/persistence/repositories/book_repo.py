"""Book repository: persistence plus audit entries for every mutation."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from bookshelf.application.dtos.book import BookCreate, BookResult
from bookshelf.core.constants import AUDIT_ENTITY_BOOK
from bookshelf.domain.exceptions import ResourceNotFoundException, ValidationException
from bookshelf.infrastructure.persistence.models.book import Book
from bookshelf.infrastructure.persistence.repositories.auditable_repo import (
    AuditableRepository,
)
from bookshelf.shared.enums import AuditAction
from bookshelf.shared.pagination import (
    CursorData,
    PaginatedResult,
    build_page,
    keyset_before,
)
from bookshelf.shared.utils.datetime import ensure_utc

if TYPE_CHECKING:
    from bookshelf.application.services.audit_trail_service import AuditTrailService

_UPDATABLE_FIELDS = frozenset({"title", "authors", "published_by"})


def _book_to_result(b: Book) -> BookResult:
    return BookResult(
        id=b.id,
        title=b.title,
        authors=b.authors,
        published_by=b.published_by,
        created_by_id=b.created_by_id,
        updated_by_id=b.updated_by_id,
        is_deleted=b.is_deleted,
        created_at=ensure_utc(b.created_at),
        updated_at=ensure_utc(b.updated_at),
    )


def _cursor_of(book: BookResult) -> CursorData:
    return CursorData(id=book.id, timestamp=book.created_at)


class BookRepository(AuditableRepository[Book]):
    """Book CRUD with soft delete. Every mutation records an audit entry."""

    def __init__(
        self,
        db: AsyncSession,
        audit_trail: AuditTrailService | None = None,
        *,
        enable_audit: bool = True,
    ) -> None:
        super().__init__(db, Book, audit_trail, enable_audit=enable_audit)

    def _get_entity_type(self) -> str:
        return AUDIT_ENTITY_BOOK

    async def _get_model(self, book_id: str, *, include_deleted: bool) -> Book | None:
        stmt = select(Book).where(Book.id == book_id)
        if not include_deleted:
            stmt = stmt.where(Book.is_deleted.is_(False))
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def _require_model(self, book_id: str, *, include_deleted: bool) -> Book:
        book = await self._get_model(book_id, include_deleted=include_deleted)
        if book is None:
            raise ResourceNotFoundException("book", book_id)
        return book

    async def get_by_id(
        self, book_id: str, *, include_deleted: bool = False
    ) -> BookResult | None:
        book = await self._get_model(book_id, include_deleted=include_deleted)
        return _book_to_result(book) if book else None

    async def list_books(
        self,
        *,
        limit: int,
        cursor: CursorData | None = None,
        include_deleted: bool = False,
    ) -> PaginatedResult[BookResult]:
        """Return one page of books ordered by (created_at DESC, id DESC)."""
        stmt = select(Book)
        if not include_deleted:
            stmt = stmt.where(Book.is_deleted.is_(False))
        if cursor is not None:
            stmt = stmt.where(keyset_before(Book.created_at, Book.id, cursor))
        stmt = stmt.order_by(Book.created_at.desc(), Book.id.desc()).limit(limit + 1)
        result = await self.db.execute(stmt)
        books = [_book_to_result(b) for b in result.scalars().all()]
        return build_page(books, limit, _cursor_of)

    async def create_book(self, data: BookCreate, actor_id: str) -> BookResult:
        book = Book(
            title=data.title,
            authors=data.authors,
            published_by=data.published_by,
            created_by_id=actor_id,
        )
        created = await self.create(book)
        return _book_to_result(created)

    async def update_book(
        self, book_id: str, changes: dict[str, Any], actor_id: str
    ) -> BookResult:
        """Apply changes to an active book; raise ResourceNotFoundException if missing."""
        unknown = set(changes) - _UPDATABLE_FIELDS
        if unknown:
            raise ValidationException(
                f"Fields cannot be updated: {', '.join(sorted(unknown))}",
                field=sorted(unknown)[0],
            )
        book = await self._require_model(book_id, include_deleted=False)
        before = self._serialize_for_audit(book)
        for key, value in changes.items():
            setattr(book, key, value)
        book.updated_by_id = actor_id
        updated = await self.update_with_audit(book, before)
        return _book_to_result(updated)

    async def soft_delete(self, book_id: str, actor_id: str) -> BookResult:
        book = await self._require_model(book_id, include_deleted=True)
        before = self._serialize_for_audit(book)
        book.is_deleted = True
        book.updated_by_id = actor_id
        updated = await self.update_with_audit(book, before, AuditAction.DELETE)
        return _book_to_result(updated)

    async def restore(self, book_id: str, actor_id: str) -> BookResult:
        book = await self._require_model(book_id, include_deleted=True)
        before = self._serialize_for_audit(book)
        book.is_deleted = False
        book.updated_by_id = actor_id
        updated = await self.update_with_audit(book, before, AuditAction.RESTORE)
        return _book_to_result(updated)
