"""Cursor-based (keyset) pagination shared by the book list and the audit log.

Results are ordered by (ordering timestamp DESC, id DESC). A cursor names the
last row of the previous page; the next page holds rows strictly after it in
that order, so pages neither repeat nor skip rows of an unchanging set.

Cursor tokens are opaque to callers: URL-safe base64 of a small JSON object.
They are not signed and must not carry secrets.
"""

from __future__ import annotations

import base64
import binascii
import json
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Generic, TypeVar

from sqlalchemy import and_, or_
from sqlalchemy.sql.elements import ColumnElement

from bookshelf.core.config import get_settings
from bookshelf.shared.utils.datetime import ensure_utc, parse_iso_utc

T = TypeVar("T")


@dataclass(frozen=True)
class CursorData:
    """Resume point: id and ordering timestamp of the last row returned."""

    id: str
    timestamp: datetime


@dataclass(frozen=True)
class PaginatedResult(Generic[T]):
    """One page of results."""

    items: list[T] = field(default_factory=list)
    next_cursor: str | None = None
    has_more: bool = False


def encode_cursor(data: CursorData) -> str:
    """Encode cursor data to an opaque URL-safe string."""
    timestamp = ensure_utc(data.timestamp)
    payload = json.dumps(
        {"id": data.id, "timestamp": timestamp.isoformat() if timestamp else None},
        separators=(",", ":"),
    )
    return base64.urlsafe_b64encode(payload.encode("utf-8")).decode("ascii")


def decode_cursor(cursor: str | None) -> CursorData | None:
    """Decode a cursor; return None for missing, malformed or tampered tokens.

    Callers treat None as "start from the first page".
    """
    if not cursor:
        return None
    try:
        raw = base64.urlsafe_b64decode(cursor.encode("ascii"))
        payload: Any = json.loads(raw.decode("utf-8"))
        if not isinstance(payload, dict):
            return None
        cursor_id = payload.get("id")
        timestamp = payload.get("timestamp")
        if not isinstance(cursor_id, str) or not cursor_id:
            return None
        if not isinstance(timestamp, str):
            return None
        return CursorData(id=cursor_id, timestamp=parse_iso_utc(timestamp))
    except (binascii.Error, UnicodeError, ValueError, OverflowError):
        return None


def clamp_limit(limit: int | None) -> int:
    """Return limit clamped to [1, pagination_max_limit]; None means the default."""
    settings = get_settings()
    if limit is None:
        return settings.pagination_default_limit
    return max(1, min(limit, settings.pagination_max_limit))


def keyset_before(
    timestamp_column: Any, id_column: Any, cursor: CursorData
) -> ColumnElement[bool]:
    """Predicate for rows strictly after cursor in (timestamp DESC, id DESC) order."""
    return or_(
        timestamp_column < cursor.timestamp,
        and_(timestamp_column == cursor.timestamp, id_column < cursor.id),
    )


def build_page(
    rows: Sequence[T],
    limit: int,
    cursor_of: Callable[[T], CursorData],
) -> PaginatedResult[T]:
    """Turn up to limit + 1 ordered rows into a page.

    The extra row only signals that more results exist; it is dropped and the
    cursor points at the last row kept.
    """
    has_more = len(rows) > limit
    items = list(rows[:limit]) if has_more else list(rows)
    next_cursor = None
    if has_more and items:
        next_cursor = encode_cursor(cursor_of(items[-1]))
    return PaginatedResult(items=items, next_cursor=next_cursor, has_more=has_more)
