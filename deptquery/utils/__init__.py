"""
Utilities module for the department query service.

This module provides shared utility functions organized by concern:
- Logging utilities for consistent logging setup and structured events
"""

from .logging import (
    setup_logging,
    log_request_event,
    log_batch_rowcounts,
    log_shutdown_event,
)

__all__ = [
    "setup_logging",
    "log_request_event",
    "log_batch_rowcounts",
    "log_shutdown_event",
]
