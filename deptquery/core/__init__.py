#!/usr/bin/env python3
"""
Core package for the department query service.

This package provides process lifecycle coordination.
"""

from .shutdown import (
    DEFAULT_SIGNALS,
    ShutdownCoordinator,
    ShutdownState,
)

__all__ = [
    "DEFAULT_SIGNALS",
    "ShutdownCoordinator",
    "ShutdownState",
]
