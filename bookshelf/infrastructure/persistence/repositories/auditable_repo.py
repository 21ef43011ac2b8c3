"""Auditable repository: audit entries recorded alongside each mutation.

Extends BaseRepository; subclasses implement _get_entity_type and may
override _serialize_for_audit. The audit trail service is injected; when it
is None, no entries are written.

The audit write shares the caller's session and transaction. By default a
failed write propagates and the mutation rolls back with it. With
AUDIT_FAILURE_FATAL=false the write runs inside a SAVEPOINT; a database error
there is logged and only the audit entry is lost.
"""

from __future__ import annotations

from abc import abstractmethod
from datetime import datetime
from typing import TYPE_CHECKING, Any, TypeVar

from sqlalchemy import inspect as sa_inspect
from sqlalchemy.exc import SQLAlchemyError

from bookshelf.core.config import get_settings
from bookshelf.infrastructure.persistence.database import Base
from bookshelf.infrastructure.persistence.repositories.base import BaseRepository
from bookshelf.shared.enums import AuditAction
from bookshelf.shared.logging import get_logger
from bookshelf.shared.utils.datetime import ensure_utc

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from bookshelf.application.services.audit_trail_service import AuditTrailService

ModelType = TypeVar("ModelType", bound=Base)
Snapshot = dict[str, Any]
_logger = get_logger(__name__)


class AuditableRepository(BaseRepository[ModelType]):
    """Repository that records create/update/delete/restore in the audit trail.

    Creates are recorded by the _on_after_create hook. Updates need the prior
    state, so callers snapshot first and persist through update_with_audit.
    """

    def __init__(
        self,
        db: AsyncSession,
        model: type[ModelType],
        audit_trail: AuditTrailService | None = None,
        *,
        enable_audit: bool = True,
    ) -> None:
        super().__init__(db, model)
        self._audit_trail = audit_trail
        self._audit_enabled = enable_audit

    @property
    def audit_trail(self) -> AuditTrailService | None:
        """Injected audit trail service (read-only)."""
        return self._audit_trail

    @abstractmethod
    def _get_entity_type(self) -> str:
        """Return the audit entity name (a key of the audit policy config)."""
        ...

    def _serialize_for_audit(self, obj: ModelType) -> Snapshot:
        """Full column snapshot of obj. The audit policy decides what is hidden."""
        snapshot: Snapshot = {}
        for attr in sa_inspect(type(obj)).column_attrs:
            value = getattr(obj, attr.key)
            if isinstance(value, datetime):
                value = ensure_utc(value)
            snapshot[attr.key] = value
        return snapshot

    async def _record(
        self,
        trail: AuditTrailService,
        action: AuditAction,
        entity_id: str,
        before: Snapshot | None,
        after: Snapshot | None,
    ) -> None:
        entity = self._get_entity_type()
        if action is AuditAction.CREATE and after is not None:
            await trail.record_create(entity, entity_id, after)
        elif action is AuditAction.UPDATE and before is not None and after is not None:
            await trail.record_update(entity, entity_id, before, after)
        elif action is AuditAction.DELETE and before is not None:
            await trail.record_delete(entity, entity_id, before)
        elif action is AuditAction.RESTORE and before is not None and after is not None:
            await trail.record_restore(entity, entity_id, before, after)
        else:
            raise ValueError(f"Unsupported audit action for repository: {action.value}")

    async def _emit_audit_event(
        self,
        action: AuditAction,
        entity_id: str,
        *,
        before: Snapshot | None = None,
        after: Snapshot | None = None,
    ) -> None:
        """Record one audit entry. No-op if auditing is disabled or no service is set."""
        trail = self._audit_trail
        if not self._audit_enabled or trail is None:
            return
        if get_settings().audit_failure_fatal:
            await self._record(trail, action, entity_id, before, after)
            return
        try:
            async with self.db.begin_nested():
                await self._record(trail, action, entity_id, before, after)
        except SQLAlchemyError as e:
            _logger.warning(
                "Failed to record audit entry for %s.%s (%s): %s",
                self._get_entity_type(),
                action.value,
                entity_id,
                str(e),
                exc_info=True,
            )

    async def _on_after_create(self, obj: ModelType) -> None:
        await super()._on_after_create(obj)
        await self._emit_audit_event(
            AuditAction.CREATE,
            getattr(obj, "id"),
            after=self._serialize_for_audit(obj),
        )

    async def update_with_audit(
        self,
        obj: ModelType,
        before: Snapshot,
        action: AuditAction = AuditAction.UPDATE,
    ) -> ModelType:
        """Persist changes on obj and record action with before and the new state.

        DELETE records only before (the entry carries no after state).
        """
        updated = await self.update(obj)
        after = None if action is AuditAction.DELETE else self._serialize_for_audit(updated)
        await self._emit_audit_event(
            action, getattr(updated, "id"), before=before, after=after
        )
        return updated
