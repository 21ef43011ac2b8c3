"""Audit log API (admin only): filtered, cursor-paginated queries over the audit trail."""

from datetime import datetime
from typing import Annotated

from fastapi import APIRouter, Depends, Query

from bookshelf.api.v1.dependencies import get_audit_trail_service, require_admin
from bookshelf.application.dtos.audit_log import AuditLogFilter, parse_fields_changed
from bookshelf.application.dtos.user import UserResult
from bookshelf.application.services.audit_trail_service import AuditTrailService
from bookshelf.schemas.audit_log import (
    AuditLogEntryResponse,
    AuditLogListResponse,
    TrackedEntitiesResponse,
)
from bookshelf.shared.enums import AuditAction

router = APIRouter()


@router.get("", response_model=AuditLogListResponse)
async def list_audits(
    _: Annotated[UserResult, Depends(require_admin)],
    audit_trail: Annotated[AuditTrailService, Depends(get_audit_trail_service)],
    entity: str | None = Query(None, max_length=100, description="Tracked entity name"),
    entity_id: str | None = Query(None, description="Entity id"),
    actor_id: str | None = Query(None, description="Acting user id"),
    action: AuditAction | None = Query(None, description="create, update, delete, restore or login"),
    request_id: str | None = Query(None, max_length=100, description="Request id"),
    from_timestamp: datetime | None = Query(None, alias="from", description="From (inclusive) ISO8601"),
    to_timestamp: datetime | None = Query(None, alias="to", description="To (inclusive) ISO8601"),
    fields_changed: str | None = Query(
        None, max_length=500, description="Comma-separated field names (any may match)"
    ),
    limit: int | None = Query(None, description="Page size (clamped to 1..max)"),
    cursor: str | None = Query(None, description="next_cursor from the previous page"),
) -> AuditLogListResponse:
    """List audit entries, newest first. Filters combine with AND; fields_changed names with OR."""
    page = await audit_trail.query(
        AuditLogFilter(
            entity=entity,
            entity_id=entity_id,
            actor_id=actor_id,
            action=action,
            request_id=request_id,
            from_timestamp=from_timestamp,
            to_timestamp=to_timestamp,
            fields_changed=parse_fields_changed(fields_changed),
            limit=limit,
            cursor=cursor,
        )
    )
    return AuditLogListResponse(
        items=[AuditLogEntryResponse.model_validate(e) for e in page.items],
        next_cursor=page.next_cursor,
        has_more=page.has_more,
    )


@router.get("/entities", response_model=TrackedEntitiesResponse)
async def list_tracked_entities(
    _: Annotated[UserResult, Depends(require_admin)],
    audit_trail: Annotated[AuditTrailService, Depends(get_audit_trail_service)],
) -> TrackedEntitiesResponse:
    """Return entity names that the audit trail tracks."""
    return TrackedEntitiesResponse(entities=audit_trail.list_tracked_entities())


@router.get("/{audit_id}", response_model=AuditLogEntryResponse)
async def get_audit(
    audit_id: str,
    _: Annotated[UserResult, Depends(require_admin)],
    audit_trail: Annotated[AuditTrailService, Depends(get_audit_trail_service)],
) -> AuditLogEntryResponse:
    """Return one audit entry."""
    return AuditLogEntryResponse.model_validate(await audit_trail.get_by_id(audit_id))
