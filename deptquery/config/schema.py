"""
Configuration schema definition using Pydantic.

This module defines the declarative configuration schema that serves as
the single source of truth for all configuration in the application.
"""

from typing import Optional

from pydantic import BaseModel, Field, model_validator

from ..constants import (
    DEFAULT_HTTP_HOST,
    DEFAULT_HTTP_PORT,
    DEFAULT_POOL_ACQUIRE_TIMEOUT,
    DEFAULT_POOL_IDLE_TIMEOUT,
    DEFAULT_POOL_MAX_SIZE,
    DEFAULT_POOL_MIN_SIZE,
    DEFAULT_SHUTDOWN_GRACE_PERIOD,
)


class ConfigSchema(BaseModel):
    """
    Declarative configuration schema.

    Each field can be set via environment variables or CLI arguments.
    """

    # Database connection
    database_url: str = Field(
        ...,
        description="Database connection URL (postgresql://host/dbname)",
        json_schema_extra={
            "env_var": "DATABASE_URL",
            "cli_arg": "db_url",
            "sensitive": True,
        }
    )

    db_user: Optional[str] = Field(
        None,
        description="Database user, overrides the one in DATABASE_URL",
        json_schema_extra={
            "env_var": "DB_USER",
            "cli_arg": "db_user",
        }
    )

    db_password: Optional[str] = Field(
        None,
        description="Database password, overrides the one in DATABASE_URL",
        json_schema_extra={
            "env_var": "DB_PASSWORD",
            "sensitive": True,
        }
    )

    # Pool sizing
    pool_min_size: int = Field(
        DEFAULT_POOL_MIN_SIZE,
        ge=0,
        description="Connections kept open while idle",
        json_schema_extra={
            "env_var": "POOL_MIN_SIZE",
            "cli_arg": "pool_min",
        }
    )

    pool_max_size: int = Field(
        DEFAULT_POOL_MAX_SIZE,
        ge=1,
        description="Maximum number of pooled connections",
        json_schema_extra={
            "env_var": "POOL_MAX_SIZE",
            "cli_arg": "pool_max",
        }
    )

    pool_idle_timeout: float = Field(
        DEFAULT_POOL_IDLE_TIMEOUT,
        gt=0,
        description="Seconds an idle connection stays in the pool",
        json_schema_extra={
            "env_var": "POOL_IDLE_TIMEOUT",
            "cli_arg": "pool_idle_timeout",
        }
    )

    pool_acquire_timeout: float = Field(
        DEFAULT_POOL_ACQUIRE_TIMEOUT,
        gt=0,
        description="Seconds to wait for a free connection",
        json_schema_extra={
            "env_var": "POOL_ACQUIRE_TIMEOUT",
            "cli_arg": "pool_acquire_timeout",
        }
    )

    # HTTP server
    http_host: str = Field(
        DEFAULT_HTTP_HOST,
        description="Interface the HTTP server binds to",
        json_schema_extra={
            "env_var": "HTTP_HOST",
            "cli_arg": "host",
        }
    )

    http_port: int = Field(
        DEFAULT_HTTP_PORT,
        ge=1,
        le=65535,
        description="Port the HTTP server listens on",
        json_schema_extra={
            "env_var": "HTTP_PORT",
            "cli_arg": "port",
        }
    )

    shutdown_grace_period: float = Field(
        DEFAULT_SHUTDOWN_GRACE_PERIOD,
        ge=0,
        description="Seconds to wait for in-use connections before forcing the pool closed",
        json_schema_extra={
            "env_var": "SHUTDOWN_GRACE_PERIOD",
            "cli_arg": "grace_period",
        }
    )

    @model_validator(mode="after")
    def check_pool_bounds(self) -> "ConfigSchema":
        """Pool minimum may not exceed the maximum."""
        if self.pool_min_size > self.pool_max_size:
            raise ValueError(
                f"pool_min_size ({self.pool_min_size}) must not exceed "
                f"pool_max_size ({self.pool_max_size})"
            )
        return self

    def mask(self) -> dict:
        """
        Return masked settings for safe logging (hides sensitive values).

        Returns:
            Dictionary with sensitive values masked
        """
        masked = {}
        for field_name, field_info in type(self).model_fields.items():
            value = getattr(self, field_name)
            extra = field_info.json_schema_extra or {}
            if extra.get("sensitive") and value:
                value = "***"
            masked[field_name] = value
        return masked

    model_config = {
        "validate_assignment": True,
        "extra": "forbid"
    }
