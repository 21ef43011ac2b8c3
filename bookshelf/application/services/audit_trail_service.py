"""Audit trail service: config-driven recording and querying of audit entries.

Write path: policy check -> diff -> persist (with request id from context)
-> one structured log line. Untracked entities are skipped silently.

Read path: validate filters against the policy registry, decode the cursor,
and return one page ordered newest first.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import replace
from typing import Any

from bookshelf.application.dtos.audit_log import (
    AuditLogEntryCreate,
    AuditLogFilter,
    AuditLogResult,
)
from bookshelf.application.interfaces.repositories import IAuditLogRepository
from bookshelf.application.services.audit_policy import AuditPolicyRegistry
from bookshelf.application.services.diff_engine import DiffEngine, DiffResult
from bookshelf.domain.exceptions import (
    InvalidDateRangeException,
    InvalidFilterException,
    ResourceNotFoundException,
)
from bookshelf.shared.context import get_actor_id, get_request_id
from bookshelf.shared.enums import AuditAction
from bookshelf.shared.logging import get_logger
from bookshelf.shared.pagination import PaginatedResult, clamp_limit, decode_cursor
from bookshelf.shared.utils.datetime import ensure_utc

logger = get_logger(__name__)

Snapshot = Mapping[str, Any]


class AuditTrailService:
    """Record and query audit entries for tracked entities."""

    def __init__(
        self,
        audit_repo: IAuditLogRepository,
        registry: AuditPolicyRegistry,
        diff_engine: DiffEngine | None = None,
    ) -> None:
        self.audit_repo = audit_repo
        self.registry = registry
        self.diff_engine = diff_engine or DiffEngine(registry)

    def _diff_for(
        self,
        entity: str,
        action: AuditAction,
        before: Snapshot | None,
        after: Snapshot | None,
    ) -> DiffResult | None:
        """Pick the before/after pair that applies to action; None when it lacks one."""
        if action is AuditAction.CREATE and after is not None:
            return self.diff_engine.compute_create_diff(entity, after)
        if action is AuditAction.DELETE and before is not None:
            return self.diff_engine.compute_delete_diff(entity, before)
        if (
            action in (AuditAction.UPDATE, AuditAction.RESTORE)
            and before is not None
            and after is not None
        ):
            return self.diff_engine.compute_update_diff(entity, before, after)
        return None

    async def record(
        self,
        entity: str,
        entity_id: str,
        action: AuditAction,
        actor_id: str,
        before: Snapshot | None = None,
        after: Snapshot | None = None,
    ) -> AuditLogResult | None:
        """Append an audit entry; return None (nothing written) if entity is untracked."""
        if not self.registry.is_tracked(entity):
            logger.debug("Skipping audit for untracked entity %s", entity)
            return None

        diff = self._diff_for(entity, action, before, after)
        entry = AuditLogEntryCreate(
            entity=entity,
            entity_id=entity_id,
            action=action,
            actor_id=actor_id,
            request_id=get_request_id(),
            diff={"before": diff.before, "after": diff.after} if diff else None,
            fields_changed=diff.fields_changed if diff else (),
        )
        created = await self.audit_repo.create(entry)

        logger.info(
            "AUDIT: %s %s:%s by %s",
            action.value,
            entity,
            entity_id,
            actor_id,
            extra={
                "audit_event": True,
                "audit_id": created.id,
                "entity": entity,
                "entity_id": entity_id,
                "action": action.value,
            },
        )
        return created

    async def _record_as_current_actor(
        self,
        entity: str,
        entity_id: str,
        action: AuditAction,
        before: Snapshot | None,
        after: Snapshot | None,
    ) -> AuditLogResult | None:
        # Anonymous or context-less mutations are not audited.
        actor_id = get_actor_id()
        if not actor_id:
            return None
        return await self.record(entity, entity_id, action, actor_id, before, after)

    async def record_create(
        self, entity: str, entity_id: str, after: Snapshot
    ) -> AuditLogResult | None:
        """Record a create by the current actor."""
        return await self._record_as_current_actor(
            entity, entity_id, AuditAction.CREATE, None, after
        )

    async def record_update(
        self, entity: str, entity_id: str, before: Snapshot, after: Snapshot
    ) -> AuditLogResult | None:
        """Record an update by the current actor."""
        return await self._record_as_current_actor(
            entity, entity_id, AuditAction.UPDATE, before, after
        )

    async def record_delete(
        self, entity: str, entity_id: str, before: Snapshot
    ) -> AuditLogResult | None:
        """Record a (soft) delete by the current actor."""
        return await self._record_as_current_actor(
            entity, entity_id, AuditAction.DELETE, before, None
        )

    async def record_restore(
        self, entity: str, entity_id: str, before: Snapshot, after: Snapshot
    ) -> AuditLogResult | None:
        """Record a restore by the current actor."""
        return await self._record_as_current_actor(
            entity, entity_id, AuditAction.RESTORE, before, after
        )

    async def query(self, filters: AuditLogFilter) -> PaginatedResult[AuditLogResult]:
        """Return one page of entries matching filters.

        Raises:
            InvalidFilterException: If filters.entity is not a tracked entity.
            InvalidDateRangeException: If from_timestamp is after to_timestamp.
        """
        # Bounds compare in UTC; naive values are taken as UTC.
        filters = replace(
            filters,
            from_timestamp=ensure_utc(filters.from_timestamp),
            to_timestamp=ensure_utc(filters.to_timestamp),
        )
        if filters.entity is not None:
            tracked = self.registry.list_tracked_entities()
            if filters.entity not in tracked:
                raise InvalidFilterException(filters.entity, list(tracked))
        if (
            filters.from_timestamp is not None
            and filters.to_timestamp is not None
            and filters.from_timestamp > filters.to_timestamp
        ):
            raise InvalidDateRangeException(
                filters.from_timestamp.isoformat(), filters.to_timestamp.isoformat()
            )
        return await self.audit_repo.list(
            filters,
            limit=clamp_limit(filters.limit),
            cursor=decode_cursor(filters.cursor),
        )

    async def get_by_id(self, audit_id: str) -> AuditLogResult:
        """Return one entry; raise ResourceNotFoundException if missing."""
        entry = await self.audit_repo.get_by_id(audit_id)
        if entry is None:
            raise ResourceNotFoundException("audit_log", audit_id)
        return entry

    def list_tracked_entities(self) -> list[str]:
        """Return entity names the audit trail tracks."""
        return list(self.registry.list_tracked_entities())
