"""
RoleGate Permission Manager

Stores allow/deny rules for role-action-resource triples and answers
"may this role perform this action on this resource?".
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Dict, Optional
import logging

from ..persistence.base import PermissionQuery, PermissionStore
from ..schemas.permission import (
    BLANKET,
    ActionScope,
    PerAction,
    PermissionRecord,
    PermissionType,
    ResourceRef,
    RoleRef,
)


logger = logging.getLogger(__name__)


class InvalidArgumentError(ValueError):
    """A role, resource or action argument is missing or malformed."""


# =============================================================================
# Manager Interface
# =============================================================================

class PermissionManager(ABC):
    """
    Permission rules per role, resource and action.

    Rules come in two granularities: per-action (ALLOW/DENY) and blanket
    (ALLOW_ALL/DENY_ALL). Roles and resources may be given as identifier
    strings or as objects with an ``identifier`` attribute.
    """

    @abstractmethod
    def allow(self, role: RoleRef, action: str, resource: ResourceRef) -> PermissionRecord:
        """Allow ``role`` to perform ``action`` on ``resource``."""

    @abstractmethod
    def deny(self, role: RoleRef, action: str, resource: ResourceRef) -> PermissionRecord:
        """Deny ``role`` from performing ``action`` on ``resource``."""

    @abstractmethod
    def allow_all(self, role: RoleRef, resource: ResourceRef) -> PermissionRecord:
        """Allow ``role`` every action on ``resource``."""

    @abstractmethod
    def deny_all(self, role: RoleRef, resource: ResourceRef) -> PermissionRecord:
        """Deny ``role`` every action on ``resource``."""

    @abstractmethod
    def has_access(self, role: RoleRef, action: str, resource: ResourceRef) -> bool:
        """Check whether ``role`` may perform ``action`` on ``resource``."""


# =============================================================================
# Storage-backed Manager
# =============================================================================

class StoragePermissionManager(PermissionManager):
    """
    PermissionManager on top of a PermissionStore.

    Usage:
        manager = StoragePermissionManager(SQLitePermissionStore("perms.db"))
        manager.allow("editor", "write", "doc1")
        if manager.has_access("editor", "write", "doc1"):
            # Allow the write

    Holds no state besides the store. Mutations read the existing rules
    and then write once; the pair is not atomic.
    """

    def __init__(self, store: PermissionStore):
        self.store = store

    def allow(self, role: RoleRef, action: str, resource: ResourceRef) -> PermissionRecord:
        role_id, resource_id = self._check_role_and_resource(role, resource)
        self._check_action(action)
        return self._set_rule(PermissionType.ALLOW, role_id, PerAction(action), resource_id)

    def deny(self, role: RoleRef, action: str, resource: ResourceRef) -> PermissionRecord:
        role_id, resource_id = self._check_role_and_resource(role, resource)
        self._check_action(action)
        return self._set_rule(PermissionType.DENY, role_id, PerAction(action), resource_id)

    def allow_all(self, role: RoleRef, resource: ResourceRef) -> PermissionRecord:
        role_id, resource_id = self._check_role_and_resource(role, resource)
        return self._set_rule(PermissionType.ALLOW_ALL, role_id, BLANKET, resource_id)

    def deny_all(self, role: RoleRef, resource: ResourceRef) -> PermissionRecord:
        role_id, resource_id = self._check_role_and_resource(role, resource)
        return self._set_rule(PermissionType.DENY_ALL, role_id, BLANKET, resource_id)

    def has_access(self, role: RoleRef, action: str, resource: ResourceRef) -> bool:
        """
        Evaluate access, first match wins:

        1. per-action ALLOW for the role -> True
        2. per-action DENY for the role -> False
        3. ALLOW_ALL for the role -> True
        4. DENY_ALL for the role -> False
        5. any role holds ALLOW on the action or ALLOW_ALL -> False
        6. otherwise the resource/action is unguarded -> True
        """
        role_id, resource_id = self._check_role_and_resource(role, resource)
        self._check_action(action)

        permissions = self._get_permissions(role_id, action, resource_id)

        for kind, decision in (
            (PermissionType.ALLOW, True),
            (PermissionType.DENY, False),
            (PermissionType.ALLOW_ALL, True),
            (PermissionType.DENY_ALL, False),
        ):
            if kind in permissions:
                logger.debug(
                    f"{role_id} {action} {resource_id}: {kind.value} rule -> {decision}"
                )
                return decision

        if self._has_resource_action_allow_permissions(action, resource_id):
            logger.debug(f"{role_id} {action} {resource_id}: guarded, no rule for role -> False")
            return False

        return True

    # =========================================================================
    # Helpers
    # =========================================================================

    def _set_rule(
        self,
        kind: PermissionType,
        role_id: str,
        scope: ActionScope,
        resource_id: str,
    ) -> PermissionRecord:
        """Flip the existing rule for the scope to ``kind``, or create one."""
        action = scope.name if isinstance(scope, PerAction) else None
        permissions = self._get_permissions(role_id, action, resource_id)

        existing = permissions.get(kind.opposite)
        if existing is not None:
            logger.info(
                f"Flipping permission {existing.id} for {role_id} on {resource_id} "
                f"from {existing.type.value} to {kind.value}"
            )
            existing.type = kind
            self.store.store(existing)
            return existing

        existing = permissions.get(kind)
        if existing is not None:
            self.store.store(existing)
            return existing

        record = PermissionRecord.for_scope(kind, role_id, scope, resource_id)
        self.store.store(record)
        logger.info(
            f"Created {kind.value} permission {record.id} for {role_id} on {resource_id}"
            + (f" ({action})" if action is not None else "")
        )
        return record

    def _get_permissions(
        self,
        role_id: str,
        action: Optional[str],
        resource_id: str,
    ) -> Dict[PermissionType, PermissionRecord]:
        """Rules of a role on a resource that apply to ``action``, keyed by kind."""
        records = self.store.list(PermissionQuery.rules_for(role_id, action, resource_id))

        permissions: Dict[PermissionType, PermissionRecord] = {}
        for record in records or []:
            permissions[record.type] = record
        return permissions

    def _has_resource_action_allow_permissions(self, action: str, resource_id: str) -> bool:
        """Whether any role holds an ALLOW on the action or an ALLOW_ALL on the resource."""
        return self.store.count(PermissionQuery.grants_for(action, resource_id)) > 0

    @staticmethod
    def _check_role_and_resource(role: RoleRef, resource: ResourceRef):
        """Resolve role and resource identifiers, rejecting missing ones."""
        role_id = _identifier(role)
        if not role_id:
            raise InvalidArgumentError("Role may not be None or empty")

        resource_id = _identifier(resource)
        if not resource_id:
            raise InvalidArgumentError("Resource may not be None or empty")

        return role_id, resource_id

    @staticmethod
    def _check_action(action: str) -> None:
        if not isinstance(action, str):
            raise InvalidArgumentError(
                "Action must be a string; use allow_all/deny_all for blanket rules"
            )


def _identifier(ref) -> Optional[str]:
    if ref is None or isinstance(ref, str):
        return ref
    return getattr(ref, "identifier", None)
