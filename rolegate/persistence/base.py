"""
PermissionStore Base Interface

Abstract storage port for permission records, plus the declarative
query object every backend understands.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import FrozenSet, List, Optional

from ..schemas.permission import (
    ACTION_TYPES,
    BLANKET_TYPES,
    PermissionRecord,
    PermissionType,
)


@dataclass(frozen=True)
class PermissionQuery:
    """
    Predicate over permission records, parameters included.

    A record matches when its resource equals ``resource``, its role equals
    ``role`` (if given), and either:
    - its action equals ``action`` and its kind is in ``action_types``, or
    - its kind is in ``blanket_types`` (action is not compared).

    A None ``action`` never matches a record's action, the same way
    ``action = NULL`` never holds in SQL.
    """
    resource: str
    action: Optional[str] = None
    role: Optional[str] = None
    action_types: FrozenSet[PermissionType] = frozenset()
    blanket_types: FrozenSet[PermissionType] = frozenset()

    @classmethod
    def rules_for(cls, role: str, action: Optional[str], resource: str) -> "PermissionQuery":
        """Per-action and blanket rules of one role on a resource."""
        return cls(
            resource=resource,
            action=action,
            role=role,
            action_types=ACTION_TYPES,
            blanket_types=BLANKET_TYPES,
        )

    @classmethod
    def grants_for(cls, action: Optional[str], resource: str) -> "PermissionQuery":
        """ALLOW rules on the action and ALLOW_ALL rules, for any role."""
        return cls(
            resource=resource,
            action=action,
            action_types=frozenset({PermissionType.ALLOW}),
            blanket_types=frozenset({PermissionType.ALLOW_ALL}),
        )

    def matches(self, record: PermissionRecord) -> bool:
        if record.resource != self.resource:
            return False
        if self.role is not None and record.role != self.role:
            return False
        if (
            self.action is not None
            and record.action == self.action
            and record.type in self.action_types
        ):
            return True
        return record.type in self.blanket_types


class PermissionStore(ABC):
    """
    Abstract interface for permission persistence.

    Implementations:
    - InMemoryPermissionStore: For testing (no persistence)
    - SQLitePermissionStore: File-based persistence (default)
    - RedisPermissionStore: Distributed persistence
    """

    @abstractmethod
    def store(self, record: PermissionRecord) -> None:
        """Save a new record or update an existing one. Assigns ``record.id`` on first save."""
        pass

    @abstractmethod
    def count(self, query: PermissionQuery) -> int:
        """Count records matching a query."""
        pass

    @abstractmethod
    def list(self, query: PermissionQuery) -> List[PermissionRecord]:
        """List records matching a query. Empty list when nothing matches."""
        pass
