#!/usr/bin/env python3
"""
Database package for the department query service.

This package provides connection pool management, configuration,
statement execution, and utilities.
"""

from .connection import (
    DatabasePool,
    create_db_connection_pool,
    close_db_connection_pool,
)

from .config import (
    validate_database_url,
    create_pool_config,
    pool_config_from_settings,
)

from .operations import (
    execute_query,
    execute_batch,
    fetch_department_employees,
    delete_children_with_rowcounts,
    seed_demo_schema,
)

from .utils import (
    classify_database_error,
    redact_url,
)

__all__ = [
    # Connection management
    "DatabasePool",
    "create_db_connection_pool",
    "close_db_connection_pool",
    # Configuration
    "validate_database_url",
    "create_pool_config",
    "pool_config_from_settings",
    # Operations
    "execute_query",
    "execute_batch",
    "fetch_department_employees",
    "delete_children_with_rowcounts",
    "seed_demo_schema",
    # Utilities
    "classify_database_error",
    "redact_url",
]
