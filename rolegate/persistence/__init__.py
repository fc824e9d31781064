"""RoleGate Persistence Module - Permission rule storage."""

from .base import PermissionQuery, PermissionStore
from .memory import InMemoryPermissionStore
from .sqlite import SQLitePermissionStore

__all__ = [
    "PermissionQuery",
    "PermissionStore",
    "InMemoryPermissionStore",
    "SQLitePermissionStore",
    "get_permission_store",
]


def get_permission_store() -> PermissionStore:
    """
    Get the configured permission store based on environment.

    Returns the appropriate store based on ROLEGATE_PERSISTENCE_BACKEND:
    - memory: In-memory (for testing)
    - sqlite: SQLite file-based (default)
    - redis: Redis (for distributed deployments)
    """
    from ..config import get_config, PersistenceBackend

    config = get_config()

    if config.persistence.backend == PersistenceBackend.MEMORY:
        return InMemoryPermissionStore()
    elif config.persistence.backend == PersistenceBackend.SQLITE:
        return SQLitePermissionStore(config.persistence.sqlite_path)
    elif config.persistence.backend == PersistenceBackend.REDIS:
        from .redis import RedisPermissionStore
        return RedisPermissionStore(
            url=config.persistence.redis_url,
            prefix=config.persistence.redis_prefix,
        )
    else:
        return SQLitePermissionStore(config.persistence.sqlite_path)
