"""RoleGate Schemas - Permission rule types."""

from .permission import (
    ACTION_TYPES,
    BLANKET,
    BLANKET_TYPES,
    ActionScope,
    Blanket,
    PerAction,
    PermissionRecord,
    PermissionType,
    Resource,
    ResourceRef,
    Role,
    RoleRef,
)

__all__ = [
    "ACTION_TYPES",
    "BLANKET",
    "BLANKET_TYPES",
    "ActionScope",
    "Blanket",
    "PerAction",
    "PermissionRecord",
    "PermissionType",
    "Resource",
    "ResourceRef",
    "Role",
    "RoleRef",
]
