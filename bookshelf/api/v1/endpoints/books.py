"""Books API: cursor-paginated list and audited create/update/soft-delete/restore.

include_deleted is honoured for admins only; for other roles it is ignored.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request

from bookshelf.api.v1.dependencies import (
    get_book_service,
    get_book_service_for_write,
    require_admin,
    require_any_role,
)
from bookshelf.application.dtos.book import BookCreate, BookUpdate
from bookshelf.application.dtos.user import UserResult
from bookshelf.application.use_cases.books import BookService
from bookshelf.core.limiter import limit_writes
from bookshelf.schemas.book import (
    BookCreateRequest,
    BookListResponse,
    BookResponse,
    BookUpdateRequest,
    DeleteResponse,
)
from bookshelf.shared.enums import UserRole
from bookshelf.shared.pagination import decode_cursor

router = APIRouter()


def _can_see_deleted(user: UserResult, include_deleted: bool) -> bool:
    return include_deleted and user.role is UserRole.ADMIN


@router.get("", response_model=BookListResponse)
async def list_books(
    current_user: Annotated[UserResult, Depends(require_any_role)],
    book_service: Annotated[BookService, Depends(get_book_service)],
    limit: int | None = Query(None, description="Page size (clamped to 1..max)"),
    cursor: str | None = Query(None, description="next_cursor from the previous page"),
    include_deleted: bool = Query(False, description="Include soft-deleted books (admin only)"),
) -> BookListResponse:
    """List books, newest first."""
    page = await book_service.list_books(
        limit=limit,
        cursor=decode_cursor(cursor),
        include_deleted=_can_see_deleted(current_user, include_deleted),
    )
    return BookListResponse(
        items=[BookResponse.model_validate(b) for b in page.items],
        next_cursor=page.next_cursor,
        has_more=page.has_more,
    )


@router.get("/{book_id}", response_model=BookResponse)
async def get_book(
    book_id: str,
    current_user: Annotated[UserResult, Depends(require_any_role)],
    book_service: Annotated[BookService, Depends(get_book_service)],
    include_deleted: bool = Query(False, description="Allow soft-deleted books (admin only)"),
) -> BookResponse:
    """Return one book."""
    book = await book_service.get_book(
        book_id, include_deleted=_can_see_deleted(current_user, include_deleted)
    )
    return BookResponse.model_validate(book)


@router.post("", response_model=BookResponse, status_code=201)
@limit_writes
async def create_book(
    request: Request,
    body: BookCreateRequest,
    current_user: Annotated[UserResult, Depends(require_any_role)],
    book_service: Annotated[BookService, Depends(get_book_service_for_write)],
) -> BookResponse:
    """Create a book owned by the caller."""
    book = await book_service.create_book(
        BookCreate(title=body.title, authors=body.authors, published_by=body.published_by),
        current_user.id,
    )
    return BookResponse.model_validate(book)


@router.patch("/{book_id}", response_model=BookResponse)
@limit_writes
async def update_book(
    request: Request,
    book_id: str,
    body: BookUpdateRequest,
    current_user: Annotated[UserResult, Depends(require_any_role)],
    book_service: Annotated[BookService, Depends(get_book_service_for_write)],
) -> BookResponse:
    """Update supplied fields. Unchanged values produce no write and no audit entry."""
    book = await book_service.update_book(
        book_id,
        BookUpdate(title=body.title, authors=body.authors, published_by=body.published_by),
        current_user.id,
    )
    return BookResponse.model_validate(book)


@router.delete("/{book_id}", response_model=DeleteResponse)
@limit_writes
async def delete_book(
    request: Request,
    book_id: str,
    current_user: Annotated[UserResult, Depends(require_any_role)],
    book_service: Annotated[BookService, Depends(get_book_service_for_write)],
) -> DeleteResponse:
    """Soft-delete a book (409 if already deleted)."""
    await book_service.delete_book(book_id, current_user.id)
    return DeleteResponse()


@router.post("/{book_id}/restore", response_model=BookResponse)
@limit_writes
async def restore_book(
    request: Request,
    book_id: str,
    current_user: Annotated[UserResult, Depends(require_admin)],
    book_service: Annotated[BookService, Depends(get_book_service_for_write)],
) -> BookResponse:
    """Restore a soft-deleted book (admin only; 409 if not deleted)."""
    book = await book_service.restore_book(book_id, current_user.id)
    return BookResponse.model_validate(book)
