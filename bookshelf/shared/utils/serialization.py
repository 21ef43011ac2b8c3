"""JSON helpers for audit snapshots.

Snapshots carry datetimes, enums and other non-JSON values. json_default
renders them the same way every time so two snapshots of equal data
serialize to equal text (used both for comparison and for storage).
"""

import json
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any
from uuid import UUID

from bookshelf.shared.utils.datetime import ensure_utc


def json_default(value: Any) -> Any:
    """json.dumps default= hook for values found in entity snapshots."""
    if isinstance(value, datetime):
        return ensure_utc(value).isoformat()
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (Decimal, UUID)):
        return str(value)
    if isinstance(value, (set, frozenset)):
        return sorted(value, key=canonical_json)
    if isinstance(value, bytes):
        return value.hex()
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def canonical_json(value: Any) -> str:
    """Return a stable JSON text for value (sorted keys, compact separators)."""
    return json.dumps(
        value,
        default=json_default,
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=False,
    )
