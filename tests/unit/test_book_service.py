"""Unit tests for BookService (soft-delete state machine). Repository is mocked."""

from dataclasses import replace
from datetime import UTC, datetime
from unittest.mock import AsyncMock

import pytest

from bookshelf.application.dtos.book import BookCreate, BookResult, BookUpdate
from bookshelf.application.use_cases.books import BookService
from bookshelf.domain.exceptions import (
    AlreadyDeletedException,
    NotDeletedException,
    ResourceNotFoundException,
)

_NOW = datetime(2024, 1, 1, tzinfo=UTC)

ACTIVE_BOOK = BookResult(
    id="b1",
    title="Dune",
    authors="Frank Herbert",
    published_by="Chilton",
    created_by_id="u1",
    updated_by_id=None,
    is_deleted=False,
    created_at=_NOW,
    updated_at=_NOW,
)
DELETED_BOOK = replace(ACTIVE_BOOK, is_deleted=True, updated_by_id="u1")


@pytest.fixture
def book_repo() -> AsyncMock:
    return AsyncMock()


@pytest.fixture
def service(book_repo: AsyncMock) -> BookService:
    return BookService(book_repo)


async def test_create_book_delegates(service: BookService, book_repo: AsyncMock) -> None:
    book_repo.create_book.return_value = ACTIVE_BOOK
    data = BookCreate("Dune", "Frank Herbert", "Chilton")
    assert await service.create_book(data, "u1") == ACTIVE_BOOK
    book_repo.create_book.assert_awaited_once_with(data, "u1")


async def test_get_book_missing_raises(service: BookService, book_repo: AsyncMock) -> None:
    book_repo.get_by_id.return_value = None
    with pytest.raises(ResourceNotFoundException):
        await service.get_book("missing")


async def test_list_books_clamps_limit(service: BookService, book_repo: AsyncMock) -> None:
    await service.list_books(limit=0)
    assert book_repo.list_books.await_args.kwargs["limit"] == 1


class TestUpdateBook:
    async def test_only_changed_fields_are_written(
        self, service: BookService, book_repo: AsyncMock
    ) -> None:
        """Supplied values equal to the stored ones are dropped before the write."""
        book_repo.get_by_id.return_value = ACTIVE_BOOK
        book_repo.update_book.return_value = replace(ACTIVE_BOOK, title="Dune Messiah")
        await service.update_book(
            "b1", BookUpdate(title="Dune Messiah", authors="Frank Herbert"), "u2"
        )
        book_repo.update_book.assert_awaited_once_with("b1", {"title": "Dune Messiah"}, "u2")

    async def test_no_effective_change_skips_write(
        self, service: BookService, book_repo: AsyncMock
    ) -> None:
        """An update that changes nothing returns the current book and writes nothing."""
        book_repo.get_by_id.return_value = ACTIVE_BOOK
        result = await service.update_book("b1", BookUpdate(title="Dune"), "u2")
        assert result == ACTIVE_BOOK
        book_repo.update_book.assert_not_awaited()

    async def test_deleted_book_cannot_be_updated(
        self, service: BookService, book_repo: AsyncMock
    ) -> None:
        book_repo.get_by_id.return_value = None
        with pytest.raises(ResourceNotFoundException):
            await service.update_book("b1", BookUpdate(title="X"), "u2")
        book_repo.get_by_id.assert_awaited_once_with("b1", include_deleted=False)


class TestDeleteRestore:
    async def test_delete_active_book(self, service: BookService, book_repo: AsyncMock) -> None:
        book_repo.get_by_id.return_value = ACTIVE_BOOK
        book_repo.soft_delete.return_value = DELETED_BOOK
        assert (await service.delete_book("b1", "u1")).is_deleted is True
        book_repo.soft_delete.assert_awaited_once_with("b1", "u1")

    async def test_delete_twice_raises(self, service: BookService, book_repo: AsyncMock) -> None:
        book_repo.get_by_id.return_value = DELETED_BOOK
        with pytest.raises(AlreadyDeletedException):
            await service.delete_book("b1", "u1")
        book_repo.soft_delete.assert_not_awaited()

    async def test_restore_deleted_book(self, service: BookService, book_repo: AsyncMock) -> None:
        book_repo.get_by_id.return_value = DELETED_BOOK
        book_repo.restore.return_value = ACTIVE_BOOK
        assert (await service.restore_book("b1", "admin")).is_deleted is False
        book_repo.restore.assert_awaited_once_with("b1", "admin")

    async def test_restore_active_book_raises(
        self, service: BookService, book_repo: AsyncMock
    ) -> None:
        book_repo.get_by_id.return_value = ACTIVE_BOOK
        with pytest.raises(NotDeletedException):
            await service.restore_book("b1", "admin")
        book_repo.restore.assert_not_awaited()

    async def test_delete_missing_book_raises_not_found(
        self, service: BookService, book_repo: AsyncMock
    ) -> None:
        book_repo.get_by_id.return_value = None
        with pytest.raises(ResourceNotFoundException):
            await service.delete_book("missing", "u1")
