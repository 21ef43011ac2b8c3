"""Tests for JWT tokens, password hashing and API key digests."""

from datetime import timedelta

import pytest

from bookshelf.infrastructure.security.jwt import create_access_token, verify_token
from bookshelf.infrastructure.security.password import (
    get_password_hash,
    hash_api_key,
    verify_password,
)


class TestJwt:
    def test_round_trip_keeps_claims(self) -> None:
        token = create_access_token({"sub": "user-1", "role": "admin"})
        payload = verify_token(token)
        assert payload["sub"] == "user-1"
        assert payload["role"] == "admin"
        assert payload["exp"] > payload["iat"]

    def test_sub_is_required(self) -> None:
        with pytest.raises(ValueError):
            create_access_token({"role": "admin"})

    def test_expired_token_rejected(self) -> None:
        token = create_access_token({"sub": "user-1"}, expires_delta=timedelta(seconds=-1))
        with pytest.raises(ValueError, match="expired"):
            verify_token(token)

    def test_garbage_token_rejected(self) -> None:
        with pytest.raises(ValueError, match="Invalid token"):
            verify_token("not.a.token")

    def test_tampered_token_rejected(self) -> None:
        token = create_access_token({"sub": "user-1"})
        head, body, signature = token.split(".")
        tampered = ".".join([head, body, signature[::-1]])
        with pytest.raises(ValueError):
            verify_token(tampered)


class TestPasswords:
    def test_hash_and_verify(self) -> None:
        hashed = get_password_hash("s3cret")
        assert hashed != "s3cret"
        assert verify_password("s3cret", hashed) is True
        assert verify_password("wrong", hashed) is False

    def test_long_passwords_are_not_truncated(self) -> None:
        """Passwords differing only after byte 72 must not verify against each other."""
        base = "x" * 80
        hashed = get_password_hash(base + "a")
        assert verify_password(base + "b", hashed) is False

    def test_malformed_hash_does_not_verify(self) -> None:
        assert verify_password("anything", "not-a-bcrypt-hash") is False


def test_api_key_digest_is_stable_hex() -> None:
    digest = hash_api_key("key-1")
    assert digest == hash_api_key("key-1")
    assert digest != hash_api_key("key-2")
    assert len(digest) == 64
    assert "key-1" not in digest
