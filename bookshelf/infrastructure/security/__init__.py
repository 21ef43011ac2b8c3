"""Security: JWT, password and API key hashing."""

from bookshelf.infrastructure.security.jwt import create_access_token, verify_token
from bookshelf.infrastructure.security.password import (
    get_password_hash,
    hash_api_key,
    verify_password,
)

__all__ = [
    "create_access_token",
    "get_password_hash",
    "hash_api_key",
    "verify_password",
    "verify_token",
]
