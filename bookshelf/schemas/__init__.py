"""Pydantic request/response schemas for the API."""

from bookshelf.schemas.audit_log import (
    AuditDiff,
    AuditLogEntryResponse,
    AuditLogListResponse,
    TrackedEntitiesResponse,
)
from bookshelf.schemas.auth import LoginRequest, TokenResponse, UserResponse
from bookshelf.schemas.book import (
    BookCreateRequest,
    BookListResponse,
    BookResponse,
    BookUpdateRequest,
    DeleteResponse,
)
from bookshelf.schemas.health import HealthResponse

__all__ = [
    "AuditDiff",
    "AuditLogEntryResponse",
    "AuditLogListResponse",
    "BookCreateRequest",
    "BookListResponse",
    "BookResponse",
    "BookUpdateRequest",
    "DeleteResponse",
    "HealthResponse",
    "LoginRequest",
    "TokenResponse",
    "TrackedEntitiesResponse",
    "UserResponse",
]
