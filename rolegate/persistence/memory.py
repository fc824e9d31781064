"""
In-Memory Permission Store

Fast, non-persistent storage for testing and development.
"""

from dataclasses import replace
from datetime import datetime, timezone
from itertools import count as counter
from typing import Dict, List

from .base import PermissionQuery, PermissionStore
from ..schemas.permission import PermissionRecord


class InMemoryPermissionStore(PermissionStore):
    """
    In-memory permission store (no persistence).

    Use for:
    - Unit testing
    - Development

    Records are copied on the way in and out, so callers only see changes
    they store. WARNING: All data is lost on restart.
    """

    def __init__(self):
        self._records: Dict[int, PermissionRecord] = {}
        self._ids = counter(1)

    def store(self, record: PermissionRecord) -> None:
        """Save or update a permission record."""
        if record.id is None:
            existing = self._find_scope(record)
            record.id = existing.id if existing is not None else next(self._ids)
            if existing is not None:
                record.created_at = existing.created_at
        record.updated_at = datetime.now(timezone.utc)
        self._records[record.id] = replace(record)

    def count(self, query: PermissionQuery) -> int:
        """Count records matching a query."""
        return sum(1 for r in self._records.values() if query.matches(r))

    def list(self, query: PermissionQuery) -> List[PermissionRecord]:
        """List records matching a query."""
        return [replace(r) for r in self._records.values() if query.matches(r)]

    def all(self) -> List[PermissionRecord]:
        """Every stored record (for testing)."""
        return [replace(r) for r in self._records.values()]

    def clear(self) -> None:
        """Clear all records (for testing)."""
        self._records.clear()

    def _find_scope(self, record: PermissionRecord):
        for existing in self._records.values():
            if (
                existing.role == record.role
                and existing.resource == record.resource
                and existing.scope_key == record.scope_key
            ):
                return existing
        return None
