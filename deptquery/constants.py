#!/usr/bin/env python3
"""
Application Constants

This module contains all configuration constants and exit codes used
throughout the department query service.
"""

# Exit codes for different failure modes
EXIT_SUCCESS = 0
EXIT_CONFIG_ERROR = 3
EXIT_STARTUP_ERROR = 4
EXIT_STATEMENT_ERROR = 5
EXIT_INTERRUPTED = 130  # Conventional exit code for Ctrl+C
EXIT_UNEXPECTED_ERROR = 10

# Database connection pool constants
DEFAULT_POOL_MIN_SIZE = 0  # Let the pool shrink completely when idle
DEFAULT_POOL_MAX_SIZE = 4
DEFAULT_POOL_IDLE_TIMEOUT = 60.0  # seconds
DEFAULT_POOL_ACQUIRE_TIMEOUT = 60.0  # seconds
DEFAULT_POOL_OPEN_TIMEOUT = 30.0  # seconds

# HTTP server constants
DEFAULT_HTTP_HOST = "0.0.0.0"
DEFAULT_HTTP_PORT = 7000

# Shutdown
DEFAULT_SHUTDOWN_GRACE_PERIOD = 10.0  # seconds
# Handlers still running once the pool is closed get this long before cancellation
DEFAULT_HANDLER_SHUTDOWN_TIMEOUT = 0.5  # seconds

# Example statements
EMPLOYEES_BY_DEPARTMENT_SQL = (
    "SELECT employee_id, first_name, last_name "
    "FROM employees "
    "WHERE department_id = %s"
)
DELETE_CHILDREN_SQL = "DELETE FROM em_childtab WHERE parentid = %s"
DEFAULT_DELETE_PARENT_IDS = (20, 30, 50)

# Page text
PAGE_TITLE = "PostgreSQL Database Driver for Python"
PAGE_CAPTION = "Example using psycopg connection pool"
