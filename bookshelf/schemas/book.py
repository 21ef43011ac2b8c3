"""Request/response schemas for the books API."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class BookCreateRequest(BaseModel):
    """Request body for POST /books."""

    title: str = Field(..., min_length=1, max_length=500)
    authors: str = Field(..., min_length=1, max_length=1000)
    published_by: str = Field(..., min_length=1, max_length=500)


class BookUpdateRequest(BaseModel):
    """Request body for PATCH /books/{id}. Omitted fields are left unchanged."""

    title: str | None = Field(default=None, min_length=1, max_length=500)
    authors: str | None = Field(default=None, min_length=1, max_length=1000)
    published_by: str | None = Field(default=None, min_length=1, max_length=500)


class BookResponse(BaseModel):
    """Book (read)."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    authors: str
    published_by: str
    created_by_id: str
    updated_by_id: str | None = None
    is_deleted: bool
    created_at: datetime
    updated_at: datetime


class BookListResponse(BaseModel):
    """Cursor-paginated page of books, newest first."""

    items: list[BookResponse]
    next_cursor: str | None = None
    has_more: bool


class DeleteResponse(BaseModel):
    """Acknowledgement for soft delete."""

    ok: bool = True
