"""Application services: audit policy, diffing, the audit trail and login."""

from bookshelf.application.services.audit_policy import AuditPolicy, AuditPolicyRegistry
from bookshelf.application.services.audit_trail_service import AuditTrailService
from bookshelf.application.services.auth_service import AuthService, LoginResult
from bookshelf.application.services.diff_engine import REDACTED, DiffEngine, DiffResult

__all__ = [
    "REDACTED",
    "AuditPolicy",
    "AuditPolicyRegistry",
    "AuditTrailService",
    "AuthService",
    "DiffEngine",
    "DiffResult",
    "LoginResult",
]
