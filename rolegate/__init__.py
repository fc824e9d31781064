"""
RoleGate - Role/Resource/Action Permission Rules

RoleGate stores explicit allow/deny rules per role, resource and action,
and decides whether a role may perform an action on a resource.

Rules exist at two granularities:
- Per-action rules (ALLOW / DENY)
- Blanket rules covering every action (ALLOW_ALL / DENY_ALL)

RoleGate does NOT:
- Resolve role hierarchies or group membership
- Cache decisions
- Keep an audit trail
"""

__version__ = "0.1.0"

from .permissions.manager import InvalidArgumentError, PermissionManager, StoragePermissionManager
from .persistence.base import PermissionQuery, PermissionStore
from .persistence.memory import InMemoryPermissionStore
from .persistence.sqlite import SQLitePermissionStore
from .schemas.permission import (
    BLANKET,
    PerAction,
    PermissionRecord,
    PermissionType,
    Resource,
    Role,
)

__all__ = [
    # Manager
    "PermissionManager",
    "StoragePermissionManager",
    "InvalidArgumentError",
    # Storage
    "PermissionStore",
    "PermissionQuery",
    "InMemoryPermissionStore",
    "SQLitePermissionStore",
    # Schemas
    "PermissionRecord",
    "PermissionType",
    "PerAction",
    "BLANKET",
    "Role",
    "Resource",
]
