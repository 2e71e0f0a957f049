#!/usr/bin/env python3
"""
Data Models Module

This module contains all data structures and type definitions used
throughout the department query service.
"""

from .database import (
    ColumnMetadata,
    ExecutionOptions,
    PoolConfig,
    QueryRequest,
    QueryResult,
    count_placeholders,
)

__all__ = [
    "ColumnMetadata",
    "ExecutionOptions",
    "PoolConfig",
    "QueryRequest",
    "QueryResult",
    "count_placeholders",
]
