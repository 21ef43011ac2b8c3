"""Application DTOs: plain frozen dataclasses passed between layers."""

from bookshelf.application.dtos.audit_log import (
    AuditLogEntryCreate,
    AuditLogFilter,
    AuditLogResult,
    parse_fields_changed,
)
from bookshelf.application.dtos.book import BookCreate, BookResult, BookUpdate
from bookshelf.application.dtos.user import UserResult

__all__ = [
    "AuditLogEntryCreate",
    "AuditLogFilter",
    "AuditLogResult",
    "BookCreate",
    "BookResult",
    "BookUpdate",
    "UserResult",
    "parse_fields_changed",
]
