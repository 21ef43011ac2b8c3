"""Shared utilities: request context, enums, logging, pagination and helpers.

Used by domain, application, and infrastructure. No business logic.
"""

from bookshelf.shared.context import (
    RequestContext,
    current_context,
    elapsed_millis,
    get_actor_id,
    get_request_id,
    request_scope,
    set_actor_id,
)
from bookshelf.shared.enums import AuditAction, UserRole
from bookshelf.shared.utils import ensure_utc, generate_cuid, utc_now

__all__ = [
    "AuditAction",
    "RequestContext",
    "UserRole",
    "current_context",
    "elapsed_millis",
    "ensure_utc",
    "generate_cuid",
    "get_actor_id",
    "get_request_id",
    "request_scope",
    "set_actor_id",
    "utc_now",
]
