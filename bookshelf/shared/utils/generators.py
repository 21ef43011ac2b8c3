"""ID and value generators (CUID for primary keys, random API keys)."""

import secrets

from cuid2 import cuid_wrapper

cuid_generator = cuid_wrapper()

API_KEY_BYTES = 32


def generate_cuid() -> str:
    """Generate a collision-resistant unique identifier (CUID2).

    Used for book, user and audit entry ids.

    Returns:
        A new CUID string.
    """
    result = cuid_generator()
    if not isinstance(result, str):
        raise TypeError(
            f"Expected str from cuid_generator, got {type(result).__name__}"
        )
    return result


def generate_api_key() -> str:
    """Return a new URL-safe API key for a user (shown once, stored hashed)."""
    return secrets.token_urlsafe(API_KEY_BYTES)
