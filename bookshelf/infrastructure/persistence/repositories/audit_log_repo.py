"""Audit log repository. Append-only; implements IAuditLogRepository."""

from __future__ import annotations

import json
from typing import Any

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql.elements import ColumnElement

from bookshelf.application.dtos.audit_log import (
    AuditLogEntryCreate,
    AuditLogFilter,
    AuditLogResult,
)
from bookshelf.infrastructure.persistence.models.audit_log import AuditLog
from bookshelf.shared.enums import AuditAction
from bookshelf.shared.pagination import (
    CursorData,
    PaginatedResult,
    build_page,
    keyset_before,
)
from bookshelf.shared.utils.datetime import ensure_utc, utc_now
from bookshelf.shared.utils.generators import generate_cuid
from bookshelf.shared.utils.serialization import json_default

_LIKE_ESCAPE = "\\"


def _orm_to_result(row: AuditLog) -> AuditLogResult:
    """Map ORM to application DTO, re-parsing diff and fields_changed."""
    diff: dict[str, Any] | None = json.loads(row.diff) if row.diff else None
    return AuditLogResult(
        id=row.id,
        timestamp=ensure_utc(row.timestamp),
        entity=row.entity,
        entity_id=row.entity_id,
        action=AuditAction(row.action),
        actor_id=row.actor_id,
        request_id=row.request_id,
        diff=diff,
        fields_changed=row.fields_changed.split(",") if row.fields_changed else [],
    )


def _escape_like(value: str) -> str:
    return (
        value.replace(_LIKE_ESCAPE, _LIKE_ESCAPE * 2)
        .replace("%", _LIKE_ESCAPE + "%")
        .replace("_", _LIKE_ESCAPE + "_")
    )


def _field_changed_clause(name: str) -> ColumnElement[bool]:
    """Match name as a whole element of the stored comma-joined list."""
    column = AuditLog.fields_changed
    escaped = _escape_like(name)
    return or_(
        column == name,
        column.like(f"{escaped},%", escape=_LIKE_ESCAPE),
        column.like(f"%,{escaped}", escape=_LIKE_ESCAPE),
        column.like(f"%,{escaped},%", escape=_LIKE_ESCAPE),
    )


def _cursor_of(entry: AuditLogResult) -> CursorData:
    return CursorData(id=entry.id, timestamp=entry.timestamp)


class AuditLogRepository:
    """Append-only audit log repository. No update/delete."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def create(self, entry: AuditLogEntryCreate) -> AuditLogResult:
        """Append one audit log entry; return created record."""
        row = AuditLog(
            id=generate_cuid(),
            timestamp=utc_now(),
            entity=entry.entity,
            entity_id=entry.entity_id,
            action=entry.action.value,
            actor_id=entry.actor_id,
            request_id=entry.request_id,
            diff=json.dumps(entry.diff, default=json_default) if entry.diff is not None else None,
            fields_changed=",".join(entry.fields_changed) or None,
        )
        self.db.add(row)
        await self.db.flush()
        await self.db.refresh(row)
        return _orm_to_result(row)

    async def get_by_id(self, audit_id: str) -> AuditLogResult | None:
        """Return one entry by id, or None."""
        result = await self.db.execute(select(AuditLog).where(AuditLog.id == audit_id))
        row = result.scalar_one_or_none()
        return _orm_to_result(row) if row else None

    async def list(
        self,
        filters: AuditLogFilter,
        *,
        limit: int,
        cursor: CursorData | None = None,
    ) -> PaginatedResult[AuditLogResult]:
        """List entries matching filters, newest first (timestamp, id).

        Exact-match filters are ANDed; fields_changed names are ORed.
        """
        conditions: list[ColumnElement[bool]] = []
        if filters.entity is not None:
            conditions.append(AuditLog.entity == filters.entity)
        if filters.entity_id is not None:
            conditions.append(AuditLog.entity_id == filters.entity_id)
        if filters.actor_id is not None:
            conditions.append(AuditLog.actor_id == filters.actor_id)
        if filters.action is not None:
            conditions.append(AuditLog.action == filters.action.value)
        if filters.request_id is not None:
            conditions.append(AuditLog.request_id == filters.request_id)
        if filters.from_timestamp is not None:
            conditions.append(AuditLog.timestamp >= filters.from_timestamp)
        if filters.to_timestamp is not None:
            conditions.append(AuditLog.timestamp <= filters.to_timestamp)
        if filters.fields_changed:
            conditions.append(
                or_(*(_field_changed_clause(name) for name in filters.fields_changed))
            )
        if cursor is not None:
            conditions.append(keyset_before(AuditLog.timestamp, AuditLog.id, cursor))

        stmt = (
            select(AuditLog)
            .where(*conditions)
            .order_by(AuditLog.timestamp.desc(), AuditLog.id.desc())
            .limit(limit + 1)
        )
        result = await self.db.execute(stmt)
        entries = [_orm_to_result(r) for r in result.scalars().all()]
        return build_page(entries, limit, _cursor_of)
