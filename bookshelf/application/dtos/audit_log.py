"""DTOs for the audit trail (append-only entries, filters)."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from bookshelf.shared.enums import AuditAction


@dataclass(frozen=True)
class AuditLogEntryCreate:
    """Input for appending one audit entry. id and timestamp are assigned on write."""

    entity: str
    entity_id: str
    action: AuditAction
    actor_id: str
    request_id: str | None
    diff: dict[str, Any] | None
    fields_changed: tuple[str, ...]


@dataclass(frozen=True)
class AuditLogResult:
    """Single audit entry (read-model). diff and fields_changed are re-parsed from storage."""

    id: str
    timestamp: datetime
    entity: str
    entity_id: str
    action: AuditAction
    actor_id: str
    request_id: str | None
    diff: dict[str, Any] | None
    fields_changed: list[str]


@dataclass(frozen=True)
class AuditLogFilter:
    """Audit query filters. All optional; fields_changed matches ANY listed field."""

    entity: str | None = None
    entity_id: str | None = None
    actor_id: str | None = None
    action: AuditAction | None = None
    request_id: str | None = None
    from_timestamp: datetime | None = None
    to_timestamp: datetime | None = None
    fields_changed: tuple[str, ...] = field(default_factory=tuple)
    limit: int | None = None
    cursor: str | None = None


def parse_fields_changed(raw: str | None) -> tuple[str, ...]:
    """Split a comma-separated field list, dropping blanks and duplicates (order kept)."""
    if not raw:
        return ()
    names: list[str] = []
    for part in raw.split(","):
        name = part.strip()
        if name and name not in names:
            names.append(name)
    return tuple(names)
