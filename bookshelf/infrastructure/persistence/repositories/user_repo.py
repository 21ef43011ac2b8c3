"""User repository with credential helpers. Interface methods return application DTOs."""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from bookshelf.application.dtos.user import UserResult
from bookshelf.core.constants import AUDIT_ENTITY_USER
from bookshelf.domain.exceptions import UserAlreadyExistsException
from bookshelf.infrastructure.persistence.models.user import User
from bookshelf.infrastructure.persistence.repositories.auditable_repo import (
    AuditableRepository,
)
from bookshelf.infrastructure.security.password import (
    get_password_hash,
    hash_api_key,
    verify_password,
)
from bookshelf.shared.enums import UserRole
from bookshelf.shared.utils.datetime import ensure_utc

if TYPE_CHECKING:
    from bookshelf.application.services.audit_trail_service import AuditTrailService

# Lazy dummy hash for constant-time comparison when user is not found (timing-attack mitigation).
_dummy_hash_cache: str | None = None


async def _get_dummy_hash() -> str:
    """Return a valid bcrypt hash for dummy comparison; computed once in thread pool."""
    global _dummy_hash_cache
    if _dummy_hash_cache is None:
        _dummy_hash_cache = await asyncio.to_thread(
            get_password_hash, "not-a-real-password"
        )
    return _dummy_hash_cache


def _user_to_result(u: User) -> UserResult:
    """Map ORM User to UserResult (no credential material)."""
    return UserResult(
        id=u.id,
        name=u.name,
        email=u.email,
        role=UserRole(u.role),
        created_at=ensure_utc(u.created_at),
    )


class UserRepository(AuditableRepository[User]):
    """User repository. Lookup by id, email or API key; authenticate; create_user."""

    def __init__(
        self,
        db: AsyncSession,
        audit_trail: AuditTrailService | None = None,
        *,
        enable_audit: bool = True,
    ) -> None:
        super().__init__(db, User, audit_trail, enable_audit=enable_audit)

    def _get_entity_type(self) -> str:
        return AUDIT_ENTITY_USER

    async def get_by_email(self, email: str) -> User | None:
        result = await self.db.execute(select(User).where(User.email == email))
        return result.scalar_one_or_none()

    async def get_by_id(self, user_id: str) -> UserResult | None:
        user = await super().get_by_id(user_id)
        return _user_to_result(user) if user else None

    async def get_by_api_key(self, api_key: str) -> UserResult | None:
        result = await self.db.execute(
            select(User).where(User.api_key_hash == hash_api_key(api_key))
        )
        user = result.scalar_one_or_none()
        return _user_to_result(user) if user else None

    async def authenticate(self, email: str, password: str) -> UserResult | None:
        user = await self.get_by_email(email)
        if not user:
            dummy_hash = await _get_dummy_hash()
            await asyncio.to_thread(verify_password, password, dummy_hash)
            return None
        if not await asyncio.to_thread(verify_password, password, user.hashed_password):
            return None
        return _user_to_result(user)

    async def create_user(
        self,
        name: str,
        email: str,
        password: str,
        role: UserRole,
        api_key: str | None = None,
    ) -> UserResult:
        """Create user; raise UserAlreadyExistsException on unique constraint violation."""
        hashed = await asyncio.to_thread(get_password_hash, password)
        user = User(
            name=name,
            email=email,
            role=role.value,
            hashed_password=hashed,
            api_key_hash=hash_api_key(api_key) if api_key else None,
        )
        try:
            created = await self.create(user)
        except IntegrityError as e:
            raise UserAlreadyExistsException(email) from e
        return _user_to_result(created)
