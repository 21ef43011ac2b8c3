"""Shared utilities: UTC datetimes, id generators, JSON canonicalization."""

from bookshelf.shared.utils.datetime import ensure_utc, parse_iso_utc, utc_now
from bookshelf.shared.utils.generators import generate_api_key, generate_cuid
from bookshelf.shared.utils.serialization import (
    canonical_json,
    json_default,
)

__all__ = [
    "canonical_json",
    "ensure_utc",
    "generate_api_key",
    "generate_cuid",
    "json_default",
    "parse_iso_utc",
    "utc_now",
]
