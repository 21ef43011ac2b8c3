"""Credential hashing.

Passwords: bcrypt over a SHA-256 pre-hash, so inputs longer than bcrypt's
72-byte limit are not silently truncated.

API keys: high-entropy random tokens, stored as a plain SHA-256 hex digest so
they can be looked up by equality.
"""

import base64
import hashlib

import bcrypt


def _prehash(password: str) -> bytes:
    return base64.b64encode(hashlib.sha256(password.encode("utf-8")).digest())


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Return True if plain_password matches hashed_password."""
    try:
        return bool(bcrypt.checkpw(_prehash(plain_password), hashed_password.encode("utf-8")))
    except (ValueError, TypeError):
        return False


def get_password_hash(password: str) -> str:
    """Return the bcrypt hash of password."""
    return bcrypt.hashpw(_prehash(password), bcrypt.gensalt()).decode("utf-8")


def hash_api_key(api_key: str) -> str:
    """Return the lookup digest stored for an API key."""
    return hashlib.sha256(api_key.encode("utf-8")).hexdigest()
