"""Audit configuration: which entities are tracked in the audit trail.

To add a new entity to audit tracking, add an entry to AUDIT_CONFIG.
No other code changes are needed; repositories name their entity and the
registry decides the rest.

Options per entity:
    track: whether mutations of this entity are recorded
    exclude: fields left out of the diff (never appear in the audit log)
    redact: fields shown as "[REDACTED]" (the change is still reported)
"""

from bookshelf.application.services.audit_policy import AuditPolicyRegistry
from bookshelf.core.constants import AUDIT_ENTITY_BOOK, AUDIT_ENTITY_USER

AUDIT_CONFIG: dict[str, dict[str, bool | list[str]]] = {
    AUDIT_ENTITY_BOOK: {
        "track": True,
        # Automatic timestamp changes are noise.
        "exclude": ["updated_at"],
        "redact": [],
    },
    AUDIT_ENTITY_USER: {
        "track": True,
        "exclude": ["updated_at"],
        "redact": ["hashed_password", "api_key_hash"],
    },
}


def build_audit_registry() -> AuditPolicyRegistry:
    """Return a fresh registry for AUDIT_CONFIG. Called once by create_app()."""
    return AuditPolicyRegistry.from_config(AUDIT_CONFIG)
