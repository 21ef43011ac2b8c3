"""Persistence models: ORM entities and mixins."""

from bookshelf.infrastructure.persistence.models.audit_log import AuditLog
from bookshelf.infrastructure.persistence.models.book import Book
from bookshelf.infrastructure.persistence.models.mixins import (
    ActorTrackingMixin,
    CuidMixin,
    SoftDeleteMixin,
    TimestampMixin,
)
from bookshelf.infrastructure.persistence.models.user import User

__all__ = [
    "ActorTrackingMixin",
    "AuditLog",
    "Book",
    "CuidMixin",
    "SoftDeleteMixin",
    "TimestampMixin",
    "User",
]
