"""Audit policy registry: which entities are tracked and how their fields are treated.

The registry is built once at startup from a plain mapping and is read-only
afterwards. It is injected into the diff engine and the audit trail service;
nothing else decides whether an entity is audited.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType


@dataclass(frozen=True)
class AuditPolicy:
    """Tracking policy for one entity.

    exclude: fields dropped from the diff entirely.
    redact: fields shown as the redaction sentinel; changes are still reported.
    """

    track: bool = True
    exclude: frozenset[str] = field(default_factory=frozenset)
    redact: frozenset[str] = field(default_factory=frozenset)

    def __post_init__(self) -> None:
        # Accept any iterable of names from config; store frozensets.
        object.__setattr__(self, "exclude", frozenset(self.exclude))
        object.__setattr__(self, "redact", frozenset(self.redact))
        overlap = self.exclude & self.redact
        if overlap:
            raise ValueError(
                f"Fields cannot be both excluded and redacted: {sorted(overlap)}"
            )


class AuditPolicyRegistry:
    """Immutable lookup from entity name to AuditPolicy."""

    def __init__(self, policies: Mapping[str, AuditPolicy]) -> None:
        self._policies: Mapping[str, AuditPolicy] = MappingProxyType(dict(policies))

    @classmethod
    def from_config(
        cls, config: Mapping[str, Mapping[str, bool | Iterable[str]]]
    ) -> AuditPolicyRegistry:
        """Build from {"Entity": {"track": bool, "exclude": [...], "redact": [...]}}."""
        policies = {}
        for entity, options in config.items():
            policies[entity] = AuditPolicy(
                track=bool(options.get("track", True)),
                exclude=frozenset(options.get("exclude", ())),  # type: ignore[arg-type]
                redact=frozenset(options.get("redact", ())),  # type: ignore[arg-type]
            )
        return cls(policies)

    def is_tracked(self, entity: str) -> bool:
        """Return True if entity has a policy with track=True."""
        policy = self._policies.get(entity)
        return policy is not None and policy.track

    def get_policy(self, entity: str) -> AuditPolicy | None:
        """Return the policy for a tracked entity, else None."""
        if not self.is_tracked(entity):
            return None
        return self._policies[entity]

    def list_tracked_entities(self) -> tuple[str, ...]:
        """Return tracked entity names in registration order."""
        return tuple(name for name, policy in self._policies.items() if policy.track)
