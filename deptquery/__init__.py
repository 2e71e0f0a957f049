#!/usr/bin/env python3
"""
Department Query Service Package

A Python package that looks up employees by department over HTTP using a
pooled PostgreSQL connection, and runs batched deletes that report the
rows affected by each bind set.

This package provides both a command-line interface and a programmatic API.
"""

__version__ = "1.0.0"
__author__ = "deptquery developers"
__description__ = (
    "Pooled PostgreSQL department lookup service with batched row-count deletes"
)
__license__ = "Apache-2.0"

# Import models for public API
from .models import (
    ColumnMetadata,
    ExecutionOptions,
    PoolConfig,
    QueryRequest,
    QueryResult,
)

# Import constants for public API
from .constants import (
    EXIT_SUCCESS,
    EXIT_CONFIG_ERROR,
    EXIT_STARTUP_ERROR,
    EXIT_STATEMENT_ERROR,
    EXIT_INTERRUPTED,
    EXIT_UNEXPECTED_ERROR,
    DEFAULT_POOL_MIN_SIZE,
    DEFAULT_POOL_MAX_SIZE,
    DEFAULT_POOL_IDLE_TIMEOUT,
    DEFAULT_POOL_ACQUIRE_TIMEOUT,
    DEFAULT_SHUTDOWN_GRACE_PERIOD,
)

# Import database functions for public API
from .database import (
    DatabasePool,
    create_db_connection_pool,
    create_pool_config,
    execute_query,
    execute_batch,
)

# Import web components for public API
from .web import (
    DepartmentServer,
    route,
    render_html,
    render_json,
)

# Import lifecycle coordination for public API
from .core import (
    ShutdownCoordinator,
    ShutdownState,
)

# Import CLI functionality for public API
from .cli import (
    main,
    create_argument_parser,
)

# Import utilities for public API
from .utils import (
    setup_logging,
)

# Public API exports
__all__ = [
    # Package metadata
    "__version__",
    "__author__",
    "__description__",
    # Data models
    "ColumnMetadata",
    "ExecutionOptions",
    "PoolConfig",
    "QueryRequest",
    "QueryResult",
    # Constants
    "EXIT_SUCCESS",
    "EXIT_CONFIG_ERROR",
    "EXIT_STARTUP_ERROR",
    "EXIT_STATEMENT_ERROR",
    "EXIT_INTERRUPTED",
    "EXIT_UNEXPECTED_ERROR",
    "DEFAULT_POOL_MIN_SIZE",
    "DEFAULT_POOL_MAX_SIZE",
    "DEFAULT_POOL_IDLE_TIMEOUT",
    "DEFAULT_POOL_ACQUIRE_TIMEOUT",
    "DEFAULT_SHUTDOWN_GRACE_PERIOD",
    # Database
    "DatabasePool",
    "create_db_connection_pool",
    "create_pool_config",
    "execute_query",
    "execute_batch",
    # Web
    "DepartmentServer",
    "route",
    "render_html",
    "render_json",
    # Lifecycle
    "ShutdownCoordinator",
    "ShutdownState",
    # CLI functions
    "main",
    "create_argument_parser",
    # Utilities
    "setup_logging",
]
