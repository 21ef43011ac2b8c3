"""Diff engine for the audit trail.

Computes the before/after difference of an entity snapshot, applying the
entity's audit policy (exclude, redact). Values are compared by their
canonical JSON form, so equal datetimes or nested structures compare equal
regardless of object identity.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from bookshelf.application.services.audit_policy import AuditPolicy, AuditPolicyRegistry
from bookshelf.shared.utils.serialization import canonical_json

REDACTED = "[REDACTED]"

_MISSING = object()


@dataclass(frozen=True)
class DiffResult:
    """Policy-filtered snapshots and the names of fields that differ."""

    before: dict[str, Any] = field(default_factory=dict)
    after: dict[str, Any] = field(default_factory=dict)
    fields_changed: tuple[str, ...] = ()


def _filter_snapshot(
    snapshot: Mapping[str, Any] | None, policy: AuditPolicy
) -> dict[str, Any]:
    if not snapshot:
        return {}
    filtered: dict[str, Any] = {}
    for key, value in snapshot.items():
        if key in policy.exclude:
            continue
        filtered[key] = REDACTED if key in policy.redact else value
    return filtered


def _canonical(snapshot: Mapping[str, Any] | None, key: str) -> str | object:
    if snapshot is None or key not in snapshot:
        return _MISSING
    return canonical_json(snapshot[key])


class DiffEngine:
    """Compute audit diffs using the injected policy registry."""

    def __init__(self, registry: AuditPolicyRegistry) -> None:
        self._registry = registry

    def compute_diff(
        self,
        entity: str,
        before: Mapping[str, Any] | None,
        after: Mapping[str, Any] | None,
    ) -> DiffResult | None:
        """Return the diff for entity, or None if the entity is not tracked.

        before=None means the entity was created; after=None means deleted.

        Raises:
            ValueError: If both before and after are None.
        """
        if before is None and after is None:
            raise ValueError("compute_diff needs at least one of before/after")
        policy = self._registry.get_policy(entity)
        if policy is None:
            return None

        filtered_before = _filter_snapshot(before, policy)
        filtered_after = _filter_snapshot(after, policy)

        keys = list(filtered_before)
        keys.extend(k for k in filtered_after if k not in filtered_before)

        # Redacted fields compare on their raw values: the change is reported
        # while the values themselves stay hidden.
        changed = tuple(
            key
            for key in keys
            if _canonical(before, key) != _canonical(after, key)
        )
        return DiffResult(
            before=filtered_before,
            after=filtered_after,
            fields_changed=changed,
        )

    def compute_create_diff(self, entity: str, data: Mapping[str, Any]) -> DiffResult | None:
        """Diff for a create (no before state)."""
        return self.compute_diff(entity, None, data)

    def compute_update_diff(
        self, entity: str, before: Mapping[str, Any], after: Mapping[str, Any]
    ) -> DiffResult | None:
        """Diff for an update or restore."""
        return self.compute_diff(entity, before, after)

    def compute_delete_diff(self, entity: str, data: Mapping[str, Any]) -> DiffResult | None:
        """Diff for a delete (no after state)."""
        return self.compute_diff(entity, data, None)
