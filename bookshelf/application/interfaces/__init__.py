"""Application ports (Protocols) implemented by infrastructure."""

from bookshelf.application.interfaces.repositories import (
    IAuditLogRepository,
    IBookRepository,
    IUserRepository,
)

__all__ = ["IAuditLogRepository", "IBookRepository", "IUserRepository"]
