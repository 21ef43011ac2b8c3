"""Request/response schemas for audit log API."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from bookshelf.shared.enums import AuditAction


class AuditDiff(BaseModel):
    """Policy-filtered snapshots around the change."""

    before: dict[str, Any] = Field(default_factory=dict)
    after: dict[str, Any] = Field(default_factory=dict)


class AuditLogEntryResponse(BaseModel):
    """Single audit log entry (read)."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    timestamp: datetime
    entity: str
    entity_id: str
    action: AuditAction
    actor_id: str
    request_id: str | None = None
    diff: AuditDiff | None = None
    fields_changed: list[str] = Field(default_factory=list)


class AuditLogListResponse(BaseModel):
    """Cursor-paginated page of audit log entries, newest first."""

    items: list[AuditLogEntryResponse]
    next_cursor: str | None = None
    has_more: bool


class TrackedEntitiesResponse(BaseModel):
    """Entity names accepted by the audit entity filter."""

    entities: list[str]
