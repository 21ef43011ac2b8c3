"""Unit tests for AuthService.login. Repository and audit trail are mocked."""

from datetime import UTC, datetime
from unittest.mock import AsyncMock, MagicMock

import pytest

from bookshelf.application.dtos.user import UserResult
from bookshelf.application.services.audit_trail_service import AuditTrailService
from bookshelf.application.services.auth_service import AuthService
from bookshelf.core.audit_config import build_audit_registry
from bookshelf.domain.exceptions import AuthenticationException
from bookshelf.infrastructure.persistence.repositories import UserRepository
from bookshelf.shared.context import get_actor_id, request_scope
from bookshelf.shared.enums import AuditAction, UserRole


@pytest.fixture
def user() -> UserResult:
    return UserResult(
        id="user-1",
        name="Reviewer",
        email="reviewer@bookpub.com",
        role=UserRole.REVIEWER,
        created_at=datetime(2024, 1, 1, tzinfo=UTC),
    )


@pytest.fixture
def audit_trail() -> AsyncMock:
    return AsyncMock(spec=AuditTrailService)


def _service(user_repo: AsyncMock, audit_trail: AsyncMock) -> AuthService:
    return AuthService(user_repo, audit_trail, token_factory=lambda claims: f"token-{claims['sub']}")


async def test_login_records_entry_under_user_repository_entity(
    user: UserResult, audit_trail: AsyncMock
) -> None:
    """The login entry uses the same entity name the user repository audits under."""
    user_repo = AsyncMock()
    user_repo.authenticate.return_value = user

    with request_scope("req-login"):
        result = await _service(user_repo, audit_trail).login(user.email, "secret")
        assert get_actor_id() == user.id

    assert result.access_token == "token-user-1"
    kwargs = audit_trail.record.await_args.kwargs
    entity = UserRepository(MagicMock())._get_entity_type()
    assert kwargs["entity"] == entity
    assert build_audit_registry().is_tracked(entity)
    assert kwargs["action"] is AuditAction.LOGIN
    assert kwargs["entity_id"] == kwargs["actor_id"] == user.id


async def test_bad_credentials_raise_and_skip_audit(audit_trail: AsyncMock) -> None:
    user_repo = AsyncMock()
    user_repo.authenticate.return_value = None

    with pytest.raises(AuthenticationException):
        await _service(user_repo, audit_trail).login("nobody@bookpub.com", "wrong")
    audit_trail.record.assert_not_awaited()
