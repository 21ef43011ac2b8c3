"""Presentation-layer dependency injection (composition root).

Provides FastAPI Depends() for DB sessions, repositories and services.
Routes depend only on these dependencies, not on infrastructure directly.

Write dependencies share one transactional session per request
(get_db_transactional is cached by FastAPI), so a book mutation and its
audit entry commit or roll back together.
"""

from __future__ import annotations

from collections.abc import Callable, Coroutine
from typing import Annotated, Any

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from bookshelf.application.dtos.user import UserResult
from bookshelf.application.services.audit_policy import AuditPolicyRegistry
from bookshelf.application.services.audit_trail_service import AuditTrailService
from bookshelf.application.services.auth_service import AuthService
from bookshelf.application.services.diff_engine import DiffEngine
from bookshelf.application.use_cases.books import BookService
from bookshelf.core.config import get_settings
from bookshelf.domain.exceptions import AuthenticationException, AuthorizationException
from bookshelf.infrastructure.persistence.database import get_db, get_db_transactional
from bookshelf.infrastructure.persistence.repositories import (
    AuditLogRepository,
    BookRepository,
    UserRepository,
)
from bookshelf.infrastructure.security.jwt import create_access_token, verify_token
from bookshelf.shared.context import set_actor_id
from bookshelf.shared.enums import UserRole

_http_bearer = HTTPBearer(auto_error=False)


# ---- Audit policy ----


def get_audit_registry(request: Request) -> AuditPolicyRegistry:
    """Registry built once by create_app() and kept on app.state."""
    return request.app.state.audit_registry


def get_diff_engine(
    registry: Annotated[AuditPolicyRegistry, Depends(get_audit_registry)],
) -> DiffEngine:
    return DiffEngine(registry)


async def get_audit_trail_service(
    db: Annotated[AsyncSession, Depends(get_db)],
    registry: Annotated[AuditPolicyRegistry, Depends(get_audit_registry)],
    diff_engine: Annotated[DiffEngine, Depends(get_diff_engine)],
) -> AuditTrailService:
    """Audit trail for the read path (queries)."""
    return AuditTrailService(AuditLogRepository(db), registry, diff_engine)


async def get_audit_trail_service_for_write(
    db: Annotated[AsyncSession, Depends(get_db_transactional)],
    registry: Annotated[AuditPolicyRegistry, Depends(get_audit_registry)],
    diff_engine: Annotated[DiffEngine, Depends(get_diff_engine)],
) -> AuditTrailService:
    """Audit trail for the write path (same transaction as the mutation)."""
    return AuditTrailService(AuditLogRepository(db), registry, diff_engine)


# ---- Books ----


async def get_book_service(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> BookService:
    """BookService for reads (no audit writes)."""
    return BookService(BookRepository(db))


async def get_book_service_for_write(
    db: Annotated[AsyncSession, Depends(get_db_transactional)],
    audit_trail: Annotated[AuditTrailService, Depends(get_audit_trail_service_for_write)],
) -> BookService:
    """BookService for mutations; every mutation records an audit entry."""
    return BookService(BookRepository(db, audit_trail))


# ---- Users and authentication ----


async def get_user_repo(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> UserRepository:
    """User repository for credential lookups."""
    return UserRepository(db)


async def get_auth_service(
    db: Annotated[AsyncSession, Depends(get_db_transactional)],
    audit_trail: Annotated[AuditTrailService, Depends(get_audit_trail_service_for_write)],
) -> AuthService:
    """AuthService; the login audit entry commits with the request."""
    return AuthService(UserRepository(db, audit_trail), audit_trail, create_access_token)


async def get_current_user(
    request: Request,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(_http_bearer)],
    user_repo: Annotated[UserRepository, Depends(get_user_repo)],
) -> UserResult:
    """Authenticate by API key header or bearer JWT; record the actor on the request context.

    The API key wins when both are sent. Raises AuthenticationException (401)
    when credentials are missing or invalid.
    """
    api_key = request.headers.get(get_settings().api_key_header)
    user: UserResult | None
    if api_key:
        user = await user_repo.get_by_api_key(api_key)
        if user is None:
            raise AuthenticationException("Invalid API key")
    elif credentials is not None:
        try:
            payload = verify_token(credentials.credentials)
        except ValueError as e:
            raise AuthenticationException("Invalid or expired token") from e
        user = await user_repo.get_by_id(payload["sub"])
        if user is None:
            raise AuthenticationException("Invalid or expired token")
    else:
        raise AuthenticationException()

    set_actor_id(user.id)
    return user


def require_roles(
    *roles: UserRole,
) -> Callable[..., Coroutine[Any, Any, UserResult]]:
    """Dependency factory: require authentication and one of roles."""

    async def _require(
        current_user: Annotated[UserResult, Depends(get_current_user)],
    ) -> UserResult:
        if current_user.role not in roles:
            raise AuthorizationException([r.value for r in roles])
        return current_user

    return _require


require_admin = require_roles(UserRole.ADMIN)
require_any_role = require_roles(UserRole.ADMIN, UserRole.REVIEWER)
