"""Book operations: the soft-delete state machine over IBookRepository.

The repository snapshots, persists and records the audit entry; this layer
decides whether a transition is allowed at all.
"""

from __future__ import annotations

from bookshelf.application.dtos.book import BookCreate, BookResult, BookUpdate
from bookshelf.application.interfaces.repositories import IBookRepository
from bookshelf.domain.exceptions import (
    AlreadyDeletedException,
    NotDeletedException,
    ResourceNotFoundException,
)
from bookshelf.shared.pagination import CursorData, PaginatedResult, clamp_limit


class BookService:
    """Create, update, soft-delete and restore books (Active <-> SoftDeleted)."""

    def __init__(self, book_repo: IBookRepository) -> None:
        self.book_repo = book_repo

    async def create_book(self, data: BookCreate, actor_id: str) -> BookResult:
        """Create a book owned by actor_id."""
        return await self.book_repo.create_book(data, actor_id)

    async def get_book(self, book_id: str, *, include_deleted: bool = False) -> BookResult:
        """Return book by id; raise ResourceNotFoundException if missing or hidden."""
        book = await self.book_repo.get_by_id(book_id, include_deleted=include_deleted)
        if book is None:
            raise ResourceNotFoundException("book", book_id)
        return book

    async def list_books(
        self,
        *,
        limit: int | None = None,
        cursor: CursorData | None = None,
        include_deleted: bool = False,
    ) -> PaginatedResult[BookResult]:
        """Return one page of books, newest first."""
        return await self.book_repo.list_books(
            limit=clamp_limit(limit),
            cursor=cursor,
            include_deleted=include_deleted,
        )

    async def update_book(
        self, book_id: str, data: BookUpdate, actor_id: str
    ) -> BookResult:
        """Apply supplied fields to an active book.

        Returns the current record untouched (no write, no audit entry) when no
        supplied field differs from what is stored.
        """
        current = await self.get_book(book_id)
        changes = {
            key: value
            for key, value in data.supplied().items()
            if getattr(current, key) != value
        }
        if not changes:
            return current
        return await self.book_repo.update_book(book_id, changes, actor_id)

    async def delete_book(self, book_id: str, actor_id: str) -> BookResult:
        """Soft-delete a book; raise AlreadyDeletedException if already deleted."""
        current = await self.get_book(book_id, include_deleted=True)
        if current.is_deleted:
            raise AlreadyDeletedException("book", book_id)
        return await self.book_repo.soft_delete(book_id, actor_id)

    async def restore_book(self, book_id: str, actor_id: str) -> BookResult:
        """Restore a soft-deleted book; raise NotDeletedException if it is active."""
        current = await self.get_book(book_id, include_deleted=True)
        if not current.is_deleted:
            raise NotDeletedException("book", book_id)
        return await self.book_repo.restore(book_id, actor_id)
