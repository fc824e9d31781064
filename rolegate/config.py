"""
RoleGate Configuration Module

Settings for the permission service, read from ROLEGATE_* environment
variables. Unknown values fall back to defaults with a warning rather
than failing at import time.
"""

import logging
import os
from dataclasses import dataclass, field
from typing import Optional
from enum import Enum


logger = logging.getLogger(__name__)

ENV_PREFIX = "ROLEGATE_"

LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


class PersistenceBackend(str, Enum):
    """Where permission rules are stored."""
    MEMORY = "memory"
    SQLITE = "sqlite"
    REDIS = "redis"


@dataclass
class PersistenceConfig:
    """Permission store selection and connection settings."""
    backend: PersistenceBackend = PersistenceBackend.SQLITE
    sqlite_path: str = "./rolegate_permissions.db"
    redis_url: Optional[str] = None
    redis_prefix: str = "rolegate:"


@dataclass
class RoleGateConfig:
    """Main configuration container."""
    persistence: PersistenceConfig = field(default_factory=PersistenceConfig)
    debug: bool = False
    log_level: str = "INFO"


def _env(name: str, default: Optional[str] = None) -> Optional[str]:
    return os.getenv(ENV_PREFIX + name, default)


def _parse_backend(value: str) -> PersistenceBackend:
    try:
        return PersistenceBackend(value.lower())
    except ValueError:
        logger.warning(f"Unknown {ENV_PREFIX}PERSISTENCE_BACKEND {value!r}, using sqlite")
        return PersistenceBackend.SQLITE


def _parse_log_level(value: str) -> str:
    level = value.upper()
    if level not in LOG_LEVELS:
        logger.warning(f"Unknown {ENV_PREFIX}LOG_LEVEL {value!r}, using INFO")
        return "INFO"
    return level


def load_config() -> RoleGateConfig:
    """
    Load configuration from environment variables.

    Environment Variables:
        ROLEGATE_PERSISTENCE_BACKEND: Permission store (memory|sqlite|redis, default: sqlite)
        ROLEGATE_SQLITE_PATH: SQLite database path (default: ./rolegate_permissions.db)
        ROLEGATE_REDIS_URL: Redis URL (e.g., redis://localhost:6379/0)
        ROLEGATE_REDIS_PREFIX: Key prefix for Redis (default: rolegate:)
        ROLEGATE_DEBUG: Enable debug mode (default: false)
        ROLEGATE_LOG_LEVEL: One of CRITICAL, ERROR, WARNING, INFO, DEBUG (default: INFO)
    """
    persistence = PersistenceConfig(
        backend=_parse_backend(_env("PERSISTENCE_BACKEND", "sqlite")),
        sqlite_path=_env("SQLITE_PATH", "./rolegate_permissions.db"),
        redis_url=_env("REDIS_URL"),
        redis_prefix=_env("REDIS_PREFIX", "rolegate:"),
    )

    return RoleGateConfig(
        persistence=persistence,
        debug=_env("DEBUG", "false").lower() in ("true", "1", "yes"),
        log_level=_parse_log_level(_env("LOG_LEVEL", "INFO")),
    )


# Singleton config instance
_config: Optional[RoleGateConfig] = None


def get_config() -> RoleGateConfig:
    """Get the global configuration (lazy-loaded singleton)."""
    global _config
    if _config is None:
        _config = load_config()
    return _config


def reset_config() -> None:
    """Reset configuration (useful for testing)."""
    global _config
    _config = None
