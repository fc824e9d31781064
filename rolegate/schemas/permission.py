"""
RoleGate Permission Schemas

Rule kinds, action scopes and the persisted permission record.
"""

from __future__ import annotations
from typing import Any, Dict, FrozenSet, Optional, Protocol, Union, runtime_checkable
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum


# =============================================================================
# Rule Kinds
# =============================================================================

class PermissionType(str, Enum):
    """Kind of a permission rule."""
    ALLOW = "ALLOW"
    DENY = "DENY"
    ALLOW_ALL = "ALLOW_ALL"
    DENY_ALL = "DENY_ALL"

    @property
    def is_blanket(self) -> bool:
        """True for kinds that govern every action on a resource."""
        return self in (PermissionType.ALLOW_ALL, PermissionType.DENY_ALL)

    @property
    def opposite(self) -> "PermissionType":
        """The kind a flip turns this one into."""
        return _OPPOSITES[self]


_OPPOSITES = {
    PermissionType.ALLOW: PermissionType.DENY,
    PermissionType.DENY: PermissionType.ALLOW,
    PermissionType.ALLOW_ALL: PermissionType.DENY_ALL,
    PermissionType.DENY_ALL: PermissionType.ALLOW_ALL,
}

ACTION_TYPES: FrozenSet[PermissionType] = frozenset({PermissionType.ALLOW, PermissionType.DENY})
BLANKET_TYPES: FrozenSet[PermissionType] = frozenset({PermissionType.ALLOW_ALL, PermissionType.DENY_ALL})


# =============================================================================
# Action Scope
# =============================================================================

@dataclass(frozen=True)
class PerAction:
    """Rule scope limited to one named action."""
    name: str


@dataclass(frozen=True)
class Blanket:
    """Rule scope covering every action on a resource."""


BLANKET = Blanket()

ActionScope = Union[PerAction, Blanket]


# =============================================================================
# Collaborators
# =============================================================================

@runtime_checkable
class Role(Protocol):
    """Anything with a stable role identifier."""

    @property
    def identifier(self) -> str: ...


@runtime_checkable
class Resource(Protocol):
    """Anything with a stable resource identifier."""

    @property
    def identifier(self) -> str: ...


RoleRef = Union[str, Role]
ResourceRef = Union[str, Resource]


# =============================================================================
# Permission Record
# =============================================================================

def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class PermissionRecord:
    """
    One persisted permission rule.

    ``action`` is None for blanket kinds. The scope of a record is derived
    from its kind, so a per-action rule on an action named "" is still a
    per-action rule.
    """
    role: str
    resource: str
    type: PermissionType
    action: Optional[str] = None
    id: Optional[int] = None
    created_at: datetime = field(default_factory=_utcnow)
    updated_at: datetime = field(default_factory=_utcnow)

    @classmethod
    def for_scope(
        cls,
        type: PermissionType,
        role: str,
        scope: ActionScope,
        resource: str,
    ) -> "PermissionRecord":
        """Build a new, unsaved record for a rule scope."""
        action = scope.name if isinstance(scope, PerAction) else None
        return cls(role=role, resource=resource, type=type, action=action)

    @property
    def scope(self) -> ActionScope:
        if self.type.is_blanket:
            return BLANKET
        return PerAction(self.action or "")

    @property
    def scope_key(self) -> str:
        """Storage key unique per scope within a (role, resource) pair."""
        scope = self.scope
        if isinstance(scope, PerAction):
            return f"action:{scope.name}"
        return "*"

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "id": self.id,
            "role": self.role,
            "action": self.action,
            "resource": self.resource,
            "type": self.type.value,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PermissionRecord":
        """Create from dictionary."""
        return cls(
            id=data.get("id"),
            role=data["role"],
            action=data.get("action"),
            resource=data["resource"],
            type=PermissionType(data["type"]),
            created_at=datetime.fromisoformat(data["created_at"]) if data.get("created_at") else _utcnow(),
            updated_at=datetime.fromisoformat(data["updated_at"]) if data.get("updated_at") else _utcnow(),
        )
