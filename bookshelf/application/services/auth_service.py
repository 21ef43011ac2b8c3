"""Login: verify credentials, issue a token and record a login audit entry."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from bookshelf.application.dtos.user import UserResult
from bookshelf.application.interfaces.repositories import IUserRepository
from bookshelf.application.services.audit_trail_service import AuditTrailService
from bookshelf.core.constants import AUDIT_ENTITY_USER
from bookshelf.domain.exceptions import AuthenticationException
from bookshelf.shared.context import set_actor_id
from bookshelf.shared.enums import AuditAction
from bookshelf.shared.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class LoginResult:
    user: UserResult
    access_token: str


class AuthService:
    """Email/password login. Token creation is injected to keep infrastructure out."""

    def __init__(
        self,
        user_repo: IUserRepository,
        audit_trail: AuditTrailService,
        token_factory: Callable[[dict[str, Any]], str],
    ) -> None:
        self.user_repo = user_repo
        self.audit_trail = audit_trail
        self.token_factory = token_factory

    async def login(self, email: str, password: str) -> LoginResult:
        """Return the user and a bearer token; raise AuthenticationException on bad credentials."""
        user = await self.user_repo.authenticate(email, password)
        if user is None:
            logger.info("Failed login attempt for %s", email)
            raise AuthenticationException("Invalid email or password")

        set_actor_id(user.id)
        token = self.token_factory({"sub": user.id, "role": user.role.value})
        await self.audit_trail.record(
            entity=AUDIT_ENTITY_USER,
            entity_id=user.id,
            action=AuditAction.LOGIN,
            actor_id=user.id,
        )
        return LoginResult(user=user, access_token=token)
