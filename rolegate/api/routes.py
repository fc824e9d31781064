"""
RoleGate API Routes

FastAPI endpoints for permission rules:
- Allow / Deny an action
- AllowAll / DenyAll on a resource
- Check access
"""

from __future__ import annotations
from typing import Optional
from fastapi import APIRouter, HTTPException, Depends
from pydantic import BaseModel, Field
from datetime import datetime, timezone
import logging

from .. import __version__
from ..permissions.manager import (
    InvalidArgumentError,
    PermissionManager,
    StoragePermissionManager,
)
from ..persistence import get_permission_store
from ..schemas.permission import PermissionRecord


logger = logging.getLogger(__name__)


# =============================================================================
# API Models
# =============================================================================

class ActionRuleRequest(BaseModel):
    """Request to allow or deny one action."""
    role: str = Field(..., min_length=1, description="Role identifier")
    action: str = Field(..., description="Action name")
    resource: str = Field(..., min_length=1, description="Resource identifier")

    class Config:
        json_schema_extra = {
            "example": {
                "role": "editor",
                "action": "write",
                "resource": "doc1",
            }
        }


class BlanketRuleRequest(BaseModel):
    """Request to allow or deny every action on a resource."""
    role: str = Field(..., min_length=1, description="Role identifier")
    resource: str = Field(..., min_length=1, description="Resource identifier")


class PermissionResponse(BaseModel):
    """A stored permission rule."""
    id: Optional[int]
    role: str
    action: Optional[str]
    resource: str
    type: str
    updated_at: str

    @classmethod
    def from_record(cls, record: PermissionRecord) -> "PermissionResponse":
        return cls(
            id=record.id,
            role=record.role,
            action=record.action,
            resource=record.resource,
            type=record.type.value,
            updated_at=record.updated_at.isoformat(),
        )


class AccessCheckResponse(BaseModel):
    """Result of an access check."""
    role: str
    action: str
    resource: str
    allowed: bool


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    version: str
    timestamp: str


# =============================================================================
# Router
# =============================================================================

router = APIRouter(prefix="/api/v1", tags=["RoleGate Permissions"])

# Manager singleton (override the dependency to inject another store)
_manager: Optional[PermissionManager] = None


def get_permission_manager() -> PermissionManager:
    """Get or create the permission manager for the configured store."""
    global _manager
    if _manager is None:
        _manager = StoragePermissionManager(get_permission_store())
    return _manager


# =============================================================================
# Endpoints
# =============================================================================

@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health Check",
)
def health_check():
    """Health check endpoint."""
    return HealthResponse(
        status="healthy",
        version=__version__,
        timestamp=datetime.now(timezone.utc).isoformat(),
    )


@router.post(
    "/permissions/allow",
    response_model=PermissionResponse,
    summary="Allow Action",
    description="Allow a role to perform an action on a resource. Flips an existing DENY rule.",
)
def allow(
    request: ActionRuleRequest,
    manager: PermissionManager = Depends(get_permission_manager),
):
    try:
        record = manager.allow(request.role, request.action, request.resource)
    except InvalidArgumentError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return PermissionResponse.from_record(record)


@router.post(
    "/permissions/deny",
    response_model=PermissionResponse,
    summary="Deny Action",
    description="Deny a role an action on a resource. Flips an existing ALLOW rule.",
)
def deny(
    request: ActionRuleRequest,
    manager: PermissionManager = Depends(get_permission_manager),
):
    try:
        record = manager.deny(request.role, request.action, request.resource)
    except InvalidArgumentError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return PermissionResponse.from_record(record)


@router.post(
    "/permissions/allow-all",
    response_model=PermissionResponse,
    summary="Allow All Actions",
)
def allow_all(
    request: BlanketRuleRequest,
    manager: PermissionManager = Depends(get_permission_manager),
):
    try:
        record = manager.allow_all(request.role, request.resource)
    except InvalidArgumentError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return PermissionResponse.from_record(record)


@router.post(
    "/permissions/deny-all",
    response_model=PermissionResponse,
    summary="Deny All Actions",
)
def deny_all(
    request: BlanketRuleRequest,
    manager: PermissionManager = Depends(get_permission_manager),
):
    try:
        record = manager.deny_all(request.role, request.resource)
    except InvalidArgumentError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return PermissionResponse.from_record(record)


@router.get(
    "/access",
    response_model=AccessCheckResponse,
    summary="Check Access",
    description="Check whether a role may perform an action on a resource.",
)
def check_access(
    role: str,
    action: str,
    resource: str,
    manager: PermissionManager = Depends(get_permission_manager),
):
    try:
        allowed = manager.has_access(role, action, resource)
    except InvalidArgumentError as e:
        raise HTTPException(status_code=400, detail=str(e))

    if not allowed:
        logger.info(f"Access denied: {role} {action} {resource}")

    return AccessCheckResponse(role=role, action=action, resource=resource, allowed=allowed)
