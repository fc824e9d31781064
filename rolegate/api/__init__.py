"""RoleGate API Module - FastAPI endpoints."""

from .routes import router, get_permission_manager

__all__ = [
    "router",
    "get_permission_manager",
]
