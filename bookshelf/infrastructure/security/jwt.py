"""JWT access tokens for bearer authentication.

Secret and algorithm come from bookshelf.core.config. The subject claim
("sub") carries the user id.
"""

from datetime import timedelta
from typing import Any, cast

from jose import ExpiredSignatureError, JWTError, jwt

from bookshelf.core.config import get_settings
from bookshelf.shared.utils.datetime import utc_now


def create_access_token(
    claims: dict[str, Any],
    expires_delta: timedelta | None = None,
) -> str:
    """Encode claims (must include "sub") into a signed token.

    Args:
        claims: Token claims, e.g. {"sub": user_id, "role": "admin"}.
        expires_delta: Optional TTL; defaults to settings.access_token_expire_minutes.

    Raises:
        ValueError: If claims has no "sub".
    """
    if not claims.get("sub"):
        raise ValueError("Token claims must include 'sub'")
    settings = get_settings()
    issued_at = utc_now()
    ttl = expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
    payload = {**claims, "iat": issued_at, "exp": issued_at + ttl}
    encoded = jwt.encode(
        payload,
        settings.secret_key.get_secret_value(),
        algorithm=settings.algorithm,
    )
    return cast(str, encoded)


def verify_token(token: str) -> dict[str, Any]:
    """Decode and validate a token; return its claims.

    Raises:
        ValueError: If the token is malformed, expired, badly signed, or lacks sub/exp.
    """
    settings = get_settings()
    try:
        payload = jwt.decode(
            token,
            settings.secret_key.get_secret_value(),
            algorithms=[settings.algorithm],
            options={"require_exp": True, "require_sub": True},
        )
    except ExpiredSignatureError as e:
        raise ValueError("Token has expired") from e
    except JWTError as e:
        raise ValueError(f"Invalid token: {e!s}") from e
    if not payload.get("sub"):
        raise ValueError("Token missing required claim: sub")
    return payload
