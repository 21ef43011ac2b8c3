"""Book repository integration tests: persistence plus the audit entries each mutation writes."""

import logging
from unittest.mock import AsyncMock

import pytest
from sqlalchemy.exc import SQLAlchemyError

from bookshelf.application.dtos.audit_log import AuditLogFilter, AuditLogResult
from bookshelf.application.dtos.book import BookCreate
from bookshelf.application.services.audit_trail_service import AuditTrailService
from bookshelf.core.config import get_settings
from bookshelf.domain.exceptions import ResourceNotFoundException, ValidationException
from bookshelf.infrastructure.persistence.repositories import (
    AuditLogRepository,
    BookRepository,
    UserRepository,
)
from bookshelf.shared.context import request_scope
from bookshelf.shared.enums import AuditAction, UserRole
from bookshelf.shared.pagination import decode_cursor

DUNE = BookCreate("Dune", "Frank Herbert", "Chilton")


@pytest.fixture
async def owner_id(db_session) -> str:
    user = await UserRepository(db_session).create_user(
        "Owner", "owner@bookpub.com", "owner-pass", UserRole.REVIEWER
    )
    return user.id


@pytest.fixture
def audit_repo(db_session) -> AuditLogRepository:
    return AuditLogRepository(db_session)


@pytest.fixture
def book_repo(db_session, audit_repo, audit_registry) -> BookRepository:
    return BookRepository(db_session, AuditTrailService(audit_repo, audit_registry))


@pytest.fixture
def non_fatal_audit(monkeypatch):
    monkeypatch.setenv("AUDIT_FAILURE_FATAL", "false")
    get_settings.cache_clear()
    yield
    monkeypatch.delenv("AUDIT_FAILURE_FATAL")
    get_settings.cache_clear()


async def _entries(audit_repo: AuditLogRepository, entity_id: str) -> dict[AuditAction, AuditLogResult]:
    page = await audit_repo.list(AuditLogFilter(entity_id=entity_id), limit=50)
    return {e.action: e for e in page.items}


@pytest.mark.requires_db
async def test_create_records_create_entry(book_repo, audit_repo, owner_id) -> None:
    """A create writes one entry with the actor, request id and full after state."""
    with request_scope("req-create", actor_id=owner_id):
        book = await book_repo.create_book(DUNE, owner_id)

    entries = await _entries(audit_repo, book.id)
    assert list(entries) == [AuditAction.CREATE]
    entry = entries[AuditAction.CREATE]
    assert entry.entity == "Book"
    assert entry.actor_id == owner_id
    assert entry.request_id == "req-create"
    assert entry.diff is not None
    assert entry.diff["before"] == {}
    assert entry.diff["after"]["title"] == "Dune"
    assert entry.diff["after"]["created_by_id"] == owner_id
    assert "updated_at" not in entry.diff["after"]
    assert {"title", "authors", "published_by", "created_by_id"} <= set(entry.fields_changed)
    assert "updated_at" not in entry.fields_changed


@pytest.mark.requires_db
async def test_update_records_changed_fields_only(book_repo, audit_repo, owner_id) -> None:
    with request_scope("req-1", actor_id=owner_id):
        book = await book_repo.create_book(DUNE, owner_id)
    with request_scope("req-2", actor_id=owner_id):
        updated = await book_repo.update_book(book.id, {"title": "Dune Messiah"}, owner_id)

    assert updated.title == "Dune Messiah"
    assert updated.updated_by_id == owner_id
    entry = (await _entries(audit_repo, book.id))[AuditAction.UPDATE]
    # updated_by_id goes from None to the actor on the first update.
    assert set(entry.fields_changed) == {"title", "updated_by_id"}
    assert entry.diff is not None
    assert entry.diff["before"]["title"] == "Dune"
    assert entry.diff["after"]["title"] == "Dune Messiah"
    assert entry.request_id == "req-2"


@pytest.mark.requires_db
async def test_update_rejects_unknown_fields(book_repo, owner_id) -> None:
    with request_scope("req-1", actor_id=owner_id):
        book = await book_repo.create_book(DUNE, owner_id)
        with pytest.raises(ValidationException):
            await book_repo.update_book(book.id, {"is_deleted": True}, owner_id)


@pytest.mark.requires_db
async def test_soft_delete_and_restore(book_repo, audit_repo, owner_id) -> None:
    """Delete hides the book and records before only; restore records is_deleted flipping back."""
    with request_scope("req-1", actor_id=owner_id):
        book = await book_repo.create_book(DUNE, owner_id)
        deleted = await book_repo.soft_delete(book.id, owner_id)
    assert deleted.is_deleted is True
    assert await book_repo.get_by_id(book.id) is None
    hidden = await book_repo.get_by_id(book.id, include_deleted=True)
    assert hidden is not None
    assert hidden.is_deleted is True

    with request_scope("req-2", actor_id=owner_id):
        restored = await book_repo.restore(book.id, owner_id)
    assert restored.is_deleted is False
    assert await book_repo.get_by_id(book.id) is not None

    entries = await _entries(audit_repo, book.id)
    assert set(entries) == {AuditAction.CREATE, AuditAction.DELETE, AuditAction.RESTORE}
    delete_entry = entries[AuditAction.DELETE]
    assert delete_entry.diff is not None
    assert delete_entry.diff["after"] == {}
    assert delete_entry.diff["before"]["is_deleted"] is False
    restore_entry = entries[AuditAction.RESTORE]
    assert "is_deleted" in restore_entry.fields_changed
    assert restore_entry.diff is not None
    assert restore_entry.diff["before"]["is_deleted"] is True
    assert restore_entry.diff["after"]["is_deleted"] is False


@pytest.mark.requires_db
async def test_missing_book_raises_not_found(book_repo, owner_id) -> None:
    with pytest.raises(ResourceNotFoundException):
        await book_repo.soft_delete("nonexistent-id", owner_id)


@pytest.mark.requires_db
async def test_no_audit_without_actor(book_repo, audit_repo, owner_id) -> None:
    """Mutations outside an authenticated context persist but are not audited."""
    book = await book_repo.create_book(DUNE, owner_id)
    assert await _entries(audit_repo, book.id) == {}


@pytest.mark.requires_db
async def test_no_audit_without_service(db_session, audit_repo, owner_id) -> None:
    repo = BookRepository(db_session)
    with request_scope("req-1", actor_id=owner_id):
        book = await repo.create_book(DUNE, owner_id)
    assert await _entries(audit_repo, book.id) == {}


@pytest.mark.requires_db
async def test_list_books_pages_newest_first(book_repo, owner_id) -> None:
    with request_scope("req-1", actor_id=owner_id):
        created = [
            await book_repo.create_book(BookCreate(f"Book {i}", "Author", "Publisher"), owner_id)
            for i in range(5)
        ]
        await book_repo.soft_delete(created[0].id, owner_id)

    seen: list[str] = []
    cursor = None
    while True:
        page = await book_repo.list_books(limit=2, cursor=decode_cursor(cursor))
        seen.extend(b.id for b in page.items)
        if not page.has_more:
            break
        cursor = page.next_cursor

    assert sorted(seen) == sorted(b.id for b in created[1:])
    assert len(seen) == len(set(seen))

    with_deleted = await book_repo.list_books(limit=50, include_deleted=True)
    assert {b.id for b in with_deleted.items} == {b.id for b in created}


@pytest.mark.requires_db
async def test_audit_failure_propagates_by_default(db_session, owner_id) -> None:
    """With fatal audit failures, an audit write error aborts the mutation."""
    trail = AsyncMock(spec=AuditTrailService)
    trail.record_create.side_effect = SQLAlchemyError("audit table unavailable")
    repo = BookRepository(db_session, trail)
    with request_scope("req-1", actor_id=owner_id):
        with pytest.raises(SQLAlchemyError):
            await repo.create_book(DUNE, owner_id)


@pytest.mark.requires_db
async def test_audit_failure_logged_when_not_fatal(
    db_session, owner_id, non_fatal_audit, caplog
) -> None:
    """With AUDIT_FAILURE_FATAL=false the book is kept and the failure is logged."""
    trail = AsyncMock(spec=AuditTrailService)
    trail.record_create.side_effect = SQLAlchemyError("audit table unavailable")
    repo = BookRepository(db_session, trail)
    with caplog.at_level(logging.WARNING):
        with request_scope("req-1", actor_id=owner_id):
            book = await repo.create_book(DUNE, owner_id)

    assert await repo.get_by_id(book.id) is not None
    assert "Failed to record audit entry for Book.create" in caplog.text
