"""
Redis Permission Store

Distributed permission storage for multi-server deployments.
"""

from typing import List, Optional
from datetime import datetime, timezone
import json
import logging

from .base import PermissionQuery, PermissionStore
from ..schemas.permission import PermissionRecord

logger = logging.getLogger(__name__)


class RedisPermissionStore(PermissionStore):
    """
    Redis-backed permission store.

    Layout:
    - ``{prefix}permission:{id}``: record as JSON
    - ``{prefix}resource:{resource}``: set of record ids for a resource
    - ``{prefix}scopes``: hash of scope -> record id, claimed with HSETNX
    - ``{prefix}permission:seq``: id counter

    Requires:
    - redis package: pip install redis
    """

    def __init__(
        self,
        url: Optional[str] = None,
        prefix: str = "rolegate:",
        client=None,
    ):
        self.prefix = prefix
        self._redis = client
        self._url = url or "redis://localhost:6379/0"

    def _get_redis(self):
        """Lazy-load Redis connection."""
        if self._redis is None:
            try:
                import redis
            except ImportError:
                raise ImportError(
                    "Redis support requires the 'redis' package. "
                    "Install with: pip install redis (or rolegate[redis])"
                )
            self._redis = redis.Redis.from_url(self._url)
        return self._redis

    def _key(self, record_id: int) -> str:
        """Generate Redis key for a record."""
        return f"{self.prefix}permission:{record_id}"

    def _resource_key(self, resource: str) -> str:
        """Generate Redis key for the resource index."""
        return f"{self.prefix}resource:{resource}"

    def _scope_index_key(self) -> str:
        return f"{self.prefix}scopes"

    def _seq_key(self) -> str:
        return f"{self.prefix}permission:seq"

    @staticmethod
    def _scope_field(record: PermissionRecord) -> str:
        return json.dumps([record.role, record.resource, record.scope_key])

    def store(self, record: PermissionRecord) -> None:
        """Save or update a permission record."""
        redis = self._get_redis()

        if record.id is None:
            new_id = int(redis.incr(self._seq_key()))
            field = self._scope_field(record)
            if redis.hsetnx(self._scope_index_key(), field, new_id):
                record.id = new_id
            else:
                record.id = int(_decode(redis.hget(self._scope_index_key(), field)))
                existing = self._get(record.id)
                if existing is not None:
                    record.created_at = existing.created_at
                logger.debug(f"Scope {field} already stored as permission {record.id}")

        record.updated_at = datetime.now(timezone.utc)
        redis.set(self._key(record.id), json.dumps(record.to_dict()))
        redis.sadd(self._resource_key(record.resource), record.id)

    def count(self, query: PermissionQuery) -> int:
        """Count records matching a query."""
        return len(self.list(query))

    def list(self, query: PermissionQuery) -> List[PermissionRecord]:
        """List records matching a query, oldest first."""
        redis = self._get_redis()
        resource_key = self._resource_key(query.resource)

        records = []
        for record_id in redis.smembers(resource_key):
            record_id = int(_decode(record_id))
            record = self._get(record_id)
            if record is None:
                # Clean up stale index entry
                redis.srem(resource_key, record_id)
                continue
            if query.matches(record):
                records.append(record)

        return sorted(records, key=lambda r: r.id)

    def _get(self, record_id: int) -> Optional[PermissionRecord]:
        data = self._get_redis().get(self._key(record_id))
        if data:
            return PermissionRecord.from_dict(json.loads(data))
        return None


def _decode(value):
    if isinstance(value, bytes):
        return value.decode()
    return value
