"""
SQLite Permission Store

File-based relational storage for permission rules.
"""

import logging
import sqlite3
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, List, Tuple

from .base import PermissionQuery, PermissionStore
from ..schemas.permission import PermissionRecord, PermissionType

logger = logging.getLogger(__name__)


class SQLitePermissionStore(PermissionStore):
    """
    SQLite-backed permission store.

    Features:
    - File-based persistence (survives restarts)
    - Automatic table creation
    - One row per rule scope, enforced by a unique index

    Inserts are upserts on (role, resource, scope_key): two callers that
    both decide to create the same rule end up sharing one row, and the
    kind written last wins.
    """

    CREATE_TABLE_SQL = """
    CREATE TABLE IF NOT EXISTS permissions (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        role TEXT NOT NULL,
        action TEXT,
        resource TEXT NOT NULL,
        type TEXT NOT NULL,
        scope_key TEXT NOT NULL,
        created_at TEXT NOT NULL,
        updated_at TEXT NOT NULL
    );

    CREATE UNIQUE INDEX IF NOT EXISTS idx_permissions_scope
        ON permissions(role, resource, scope_key);
    CREATE INDEX IF NOT EXISTS idx_permissions_resource ON permissions(resource);
    """

    def __init__(self, db_path: str = "./rolegate_permissions.db"):
        self.db_path = db_path
        self._ensure_db()

    def _ensure_db(self) -> None:
        """Ensure database and tables exist."""
        Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)
        with sqlite3.connect(self.db_path) as conn:
            conn.executescript(self.CREATE_TABLE_SQL)
        logger.debug(f"Permission schema ready at {self.db_path}")

    def _get_connection(self) -> sqlite3.Connection:
        """Get a new database connection."""
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        return conn

    def store(self, record: PermissionRecord) -> None:
        """Save or update a permission record."""
        now = datetime.now(timezone.utc)
        with self._get_connection() as conn:
            if record.id is not None:
                cursor = conn.execute(
                    """
                    UPDATE permissions
                    SET role = ?, action = ?, resource = ?, type = ?, scope_key = ?, updated_at = ?
                    WHERE id = ?
                    """,
                    (
                        record.role,
                        record.action,
                        record.resource,
                        record.type.value,
                        record.scope_key,
                        now.isoformat(),
                        record.id,
                    ),
                )
                if cursor.rowcount > 0:
                    record.updated_at = now
                    return

            conn.execute(
                """
                INSERT INTO permissions
                (role, action, resource, type, scope_key, created_at, updated_at)
                VALUES (?, ?, ?, ?, ?, ?, ?)
                ON CONFLICT(role, resource, scope_key)
                DO UPDATE SET type = excluded.type, updated_at = excluded.updated_at
                """,
                (
                    record.role,
                    record.action,
                    record.resource,
                    record.type.value,
                    record.scope_key,
                    record.created_at.isoformat(),
                    now.isoformat(),
                ),
            )
            row = conn.execute(
                "SELECT id, created_at FROM permissions WHERE role = ? AND resource = ? AND scope_key = ?",
                (record.role, record.resource, record.scope_key),
            ).fetchone()
            record.id = row["id"]
            record.created_at = datetime.fromisoformat(row["created_at"])
            record.updated_at = now

    def count(self, query: PermissionQuery) -> int:
        """Count records matching a query."""
        where, params = self._where(query)
        with self._get_connection() as conn:
            row = conn.execute(
                f"SELECT COUNT(*) AS n FROM permissions WHERE {where}",
                params,
            ).fetchone()
            return row["n"]

    def list(self, query: PermissionQuery) -> List[PermissionRecord]:
        """List records matching a query, oldest first."""
        where, params = self._where(query)
        with self._get_connection() as conn:
            rows = conn.execute(
                f"SELECT * FROM permissions WHERE {where} ORDER BY id",
                params,
            ).fetchall()
            return [self._row_to_record(row) for row in rows]

    def _where(self, query: PermissionQuery) -> Tuple[str, List[Any]]:
        """Translate a query into a WHERE clause and its parameters."""
        clauses = ["resource = ?"]
        params: List[Any] = [query.resource]

        if query.role is not None:
            clauses.append("role = ?")
            params.append(query.role)

        alternatives = []
        if query.action is not None and query.action_types:
            types = sorted(t.value for t in query.action_types)
            alternatives.append(f"(action = ? AND type IN ({', '.join('?' for _ in types)}))")
            params.append(query.action)
            params.extend(types)
        if query.blanket_types:
            types = sorted(t.value for t in query.blanket_types)
            alternatives.append(f"type IN ({', '.join('?' for _ in types)})")
            params.extend(types)
        if not alternatives:
            alternatives.append("0")

        clauses.append("(" + " OR ".join(alternatives) + ")")
        return " AND ".join(clauses), params

    def _row_to_record(self, row: sqlite3.Row) -> PermissionRecord:
        """Convert a database row to a PermissionRecord."""
        return PermissionRecord(
            id=row["id"],
            role=row["role"],
            action=row["action"],
            resource=row["resource"],
            type=PermissionType(row["type"]),
            created_at=datetime.fromisoformat(row["created_at"]),
            updated_at=datetime.fromisoformat(row["updated_at"]),
        )
