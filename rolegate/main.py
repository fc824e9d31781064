"""
RoleGate Main Application

FastAPI application entry point for the RoleGate permission service.
"""

from fastapi import FastAPI
import logging

from . import __version__
from .api.routes import router
from .config import get_config


# Configure logging
logging.basicConfig(
    level=get_config().log_level,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

# Create FastAPI app
app = FastAPI(
    title="RoleGate",
    description="""
## RoleGate - Role/Resource/Action Permission Rules

### Rules
- `ALLOW` / `DENY` govern one action of a role on a resource
- `ALLOW_ALL` / `DENY_ALL` govern every action of a role on a resource

### Access decision (first match wins)
1. Per-action rule for the role
2. Blanket rule for the role
3. Any role allowed on the resource/action -> denied
4. Otherwise -> allowed
    """,
    version=__version__,
    debug=get_config().debug,
)

app.include_router(router)


@app.get("/", tags=["Root"])
def root():
    """Root endpoint."""
    return {
        "name": "RoleGate",
        "version": __version__,
        "docs": "/docs",
        "health": "/api/v1/health",
    }
