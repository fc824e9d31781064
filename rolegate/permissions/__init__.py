"""RoleGate Permissions Module - Rule storage and access decisions."""

from .manager import InvalidArgumentError, PermissionManager, StoragePermissionManager

__all__ = [
    "InvalidArgumentError",
    "PermissionManager",
    "StoragePermissionManager",
]
