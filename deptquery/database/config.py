"""
Database configuration management module.

This module handles pool configuration creation and connection URL
validation for the department query service.
"""

import logging
from typing import Optional
from urllib.parse import urlparse

from ..config import ConfigSchema
from ..models import PoolConfig
from ..constants import (
    DEFAULT_POOL_ACQUIRE_TIMEOUT,
    DEFAULT_POOL_IDLE_TIMEOUT,
    DEFAULT_POOL_MAX_SIZE,
    DEFAULT_POOL_MIN_SIZE,
)

logger = logging.getLogger(__name__)


def validate_database_url(url: str) -> bool:
    """
    Validate that a database URL has the correct format.

    Credentials are optional since they can be supplied separately.

    Args:
        url: Database URL to validate

    Returns:
        True if URL format is valid, False otherwise
    """
    if not url:
        return False

    try:
        parsed = urlparse(url)
    except (TypeError, ValueError) as e:
        logger.error(f"Invalid database URL format: {str(e)}")
        return False

    if not parsed.scheme:
        logger.error("Database URL missing scheme (e.g., postgresql://)")
        return False

    if parsed.scheme not in ["postgresql", "postgres"]:
        logger.error(
            f"Database URL scheme '{parsed.scheme}' not supported. Use 'postgresql://' or 'postgres://'"
        )
        return False

    if not parsed.hostname:
        logger.error("Database URL missing hostname")
        return False

    if not parsed.path or parsed.path == "/":
        logger.error("Database URL missing database name")
        return False

    return True


def create_pool_config(
    url: str,
    user: Optional[str] = None,
    password: Optional[str] = None,
    min_size: Optional[int] = None,
    max_size: Optional[int] = None,
    idle_timeout: Optional[float] = None,
    acquire_timeout: Optional[float] = None,
) -> Optional[PoolConfig]:
    """
    Create a pool configuration with validation.

    Args:
        url: Database connection URL
        user: Optional user name
        password: Optional password
        min_size: Connections kept while idle (default: DEFAULT_POOL_MIN_SIZE)
        max_size: Maximum pooled connections (default: DEFAULT_POOL_MAX_SIZE)
        idle_timeout: Idle connection lifetime in seconds (default: DEFAULT_POOL_IDLE_TIMEOUT)
        acquire_timeout: Acquire wait in seconds (default: DEFAULT_POOL_ACQUIRE_TIMEOUT)

    Returns:
        PoolConfig object or None if validation fails
    """
    if not validate_database_url(url):
        return None

    final_min_size = min_size if min_size is not None else DEFAULT_POOL_MIN_SIZE
    final_max_size = max_size if max_size is not None else DEFAULT_POOL_MAX_SIZE
    final_idle_timeout = (
        idle_timeout if idle_timeout is not None else DEFAULT_POOL_IDLE_TIMEOUT
    )
    final_acquire_timeout = (
        acquire_timeout if acquire_timeout is not None else DEFAULT_POOL_ACQUIRE_TIMEOUT
    )

    if final_min_size < 0:
        logger.error(f"Pool min size must be non-negative, got {final_min_size}")
        return None

    if final_max_size < 1:
        logger.error(f"Pool max size must be at least 1, got {final_max_size}")
        return None

    if final_min_size > final_max_size:
        logger.error(
            f"Pool min size ({final_min_size}) must not exceed max size ({final_max_size})"
        )
        return None

    if final_idle_timeout <= 0:
        logger.error(f"Idle timeout must be positive, got {final_idle_timeout}")
        return None

    if final_acquire_timeout <= 0:
        logger.error(f"Acquire timeout must be positive, got {final_acquire_timeout}")
        return None

    return PoolConfig(
        conninfo=url,
        user=user,
        password=password,
        min_size=final_min_size,
        max_size=final_max_size,
        idle_timeout=final_idle_timeout,
        acquire_timeout=final_acquire_timeout,
    )


def pool_config_from_settings(settings: ConfigSchema) -> Optional[PoolConfig]:
    """Build a PoolConfig from loaded application settings."""
    return create_pool_config(
        url=settings.database_url,
        user=settings.db_user,
        password=settings.db_password,
        min_size=settings.pool_min_size,
        max_size=settings.pool_max_size,
        idle_timeout=settings.pool_idle_timeout,
        acquire_timeout=settings.pool_acquire_timeout,
    )
