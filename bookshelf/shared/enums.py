"""Shared enumerations for the bookshelf service.

Cross-cutting enums used by application, infrastructure and API layers
(audit actions, user roles). Values are the wire/storage strings.
"""

from enum import Enum


class AuditAction(str, Enum):
    """Lifecycle events recorded in the audit trail."""

    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"
    RESTORE = "restore"
    LOGIN = "login"


class UserRole(str, Enum):
    """Role of an authenticated user."""

    ADMIN = "admin"
    REVIEWER = "reviewer"
