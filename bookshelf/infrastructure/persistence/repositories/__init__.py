"""Persistence repositories. Re-exports for dependency injection."""

from bookshelf.infrastructure.persistence.repositories.audit_log_repo import (
    AuditLogRepository,
)
from bookshelf.infrastructure.persistence.repositories.auditable_repo import (
    AuditableRepository,
)
from bookshelf.infrastructure.persistence.repositories.base import BaseRepository
from bookshelf.infrastructure.persistence.repositories.book_repo import BookRepository
from bookshelf.infrastructure.persistence.repositories.user_repo import UserRepository

__all__ = [
    "AuditLogRepository",
    "AuditableRepository",
    "BaseRepository",
    "BookRepository",
    "UserRepository",
]
