"""Auth API: login (email + password -> JWT) and current user."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request

from bookshelf.api.v1.dependencies import get_auth_service, require_any_role
from bookshelf.application.dtos.user import UserResult
from bookshelf.application.services.auth_service import AuthService
from bookshelf.core.limiter import limit_auth
from bookshelf.schemas.auth import LoginRequest, TokenResponse, UserResponse

router = APIRouter()


@router.post("/login", response_model=TokenResponse)
@limit_auth
async def login(
    request: Request,
    body: LoginRequest,
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
) -> TokenResponse:
    """Authenticate with email and password; return a bearer token.

    A successful login is recorded in the audit trail (entity User, action login).
    """
    result = await auth_service.login(body.email, body.password)
    return TokenResponse(
        access_token=result.access_token,
        user=UserResponse.model_validate(result.user),
    )


@router.get("/me", response_model=UserResponse)
async def me(
    current_user: Annotated[UserResult, Depends(require_any_role)],
) -> UserResponse:
    """Return the authenticated user."""
    return UserResponse.model_validate(current_user)
