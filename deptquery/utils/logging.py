"""
Logging utilities for the department query service.

This module provides centralized logging configuration and structured
event helpers so request, batch and shutdown events can be parsed from
the log by automated tools.
"""

import json
import logging
import time
from typing import Optional, Sequence


def setup_logging(verbose: bool = False):
    """Setup logging configuration with appropriate level and format."""
    level = logging.DEBUG if verbose else logging.INFO
    format_string = "%(asctime)s - %(levelname)s - %(message)s"

    logging.basicConfig(level=level, format=format_string, datefmt="%Y-%m-%d %H:%M:%S")

    # Set specific logger levels
    logging.getLogger("psycopg.pool").setLevel(logging.WARNING)  # Reduce pool worker noise
    logging.getLogger("aiohttp.access").setLevel(logging.WARNING)  # REQUEST events cover this


def log_request_event(
    path: str,
    status: int,
    duration: float,
    dept_id: Optional[int] = None,
    row_count: Optional[int] = None,
    error: Optional[str] = None,
    logger: Optional[logging.Logger] = None,
):
    """
    Log a structured record for one handled HTTP request.

    Args:
        path: Request path
        status: HTTP status code returned
        duration: Time spent handling the request (seconds)
        dept_id: Department id parsed from the path, if any
        row_count: Number of rows rendered, if a query ran
        error: Error message rendered to the caller, if any
        logger: Logger instance to use (defaults to current module logger)
    """
    if logger is None:
        logger = logging.getLogger(__name__)

    request_record = {
        "event_type": "request",
        "timestamp": time.time(),
        "path": path,
        "dept_id": dept_id,
        "status": status,
        "row_count": row_count,
        "duration_seconds": round(duration, 3),
        "error": error,
    }

    if error is None:
        logger.info(f"REQUEST: {json.dumps(request_record, ensure_ascii=False)}")
    else:
        logger.warning(f"REQUEST: {json.dumps(request_record, ensure_ascii=False)}")


def log_batch_rowcounts(
    sql: str,
    bind_sets: Sequence[Sequence],
    row_counts: Sequence[int],
    committed: bool,
    duration: float,
    logger: Optional[logging.Logger] = None,
):
    """
    Log a structured record of a batch execution with per-bind-set row counts.

    Args:
        sql: Statement executed once per bind set
        bind_sets: Bind sets in execution order
        row_counts: Affected rows per bind set, same order
        committed: Whether the batch was committed
        duration: Time taken by the batch (seconds)
        logger: Logger instance to use (defaults to current module logger)
    """
    if logger is None:
        logger = logging.getLogger(__name__)

    batch_record = {
        "event_type": "batch_rowcounts",
        "timestamp": time.time(),
        "sql": sql,
        "bind_sets": [list(bind_set) for bind_set in bind_sets],
        "row_counts": list(row_counts),
        "rows_affected": sum(row_counts),
        "committed": committed,
        "duration_seconds": round(duration, 3),
    }

    logger.info(f"BATCH_ROWCOUNTS: {json.dumps(batch_record, ensure_ascii=False, default=str)}")


def log_shutdown_event(
    state: str,
    outstanding: int,
    signal_name: Optional[str] = None,
    forced: bool = False,
    logger: Optional[logging.Logger] = None,
):
    """
    Log a structured shutdown state transition.

    Args:
        state: State entered ("draining" or "stopped")
        outstanding: Connections still checked out at the transition
        signal_name: Signal that triggered shutdown, if any
        forced: Whether the pool was closed before becoming idle
        logger: Logger instance to use (defaults to current module logger)
    """
    if logger is None:
        logger = logging.getLogger(__name__)

    shutdown_record = {
        "event_type": "shutdown",
        "timestamp": time.time(),
        "state": state,
        "signal": signal_name,
        "outstanding_connections": outstanding,
        "forced": forced,
    }

    if forced:
        logger.warning(f"SHUTDOWN: {json.dumps(shutdown_record, ensure_ascii=False)}")
    else:
        logger.info(f"SHUTDOWN: {json.dumps(shutdown_record, ensure_ascii=False)}")
