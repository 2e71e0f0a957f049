#!/usr/bin/env python3
"""
Database Models

This module contains data structures related to pool configuration,
statement requests and query results.
"""

import re
from dataclasses import dataclass, field
from typing import Any, List, NamedTuple, Optional, Sequence, Tuple

# Positional psycopg placeholder; "%%" is a literal percent sign
_PLACEHOLDER_RE = re.compile(r"%%|%s")


def count_placeholders(sql: str) -> int:
    """
    Count positional ``%s`` placeholders in a SQL statement.

    Args:
        sql: SQL text using psycopg's positional placeholder style

    Returns:
        Number of ``%s`` placeholders (escaped ``%%`` is not counted)
    """
    return sum(1 for match in _PLACEHOLDER_RE.finditer(sql) if match.group() == "%s")


class PoolConfig(NamedTuple):
    """
    Connection pool configuration settings.

    Attributes:
        conninfo: Connection target (PostgreSQL URL or DSN)
        user: Optional user name overriding the one in conninfo
        password: Optional password overriding the one in conninfo
        min_size: Connections kept open while idle
        max_size: Upper bound on connections handed out at once
        idle_timeout: Seconds an idle connection may stay in the pool
        acquire_timeout: Seconds to wait for a free connection
    """

    conninfo: str
    user: Optional[str] = None
    password: Optional[str] = None
    min_size: int = 0
    max_size: int = 4
    idle_timeout: float = 60.0  # seconds
    acquire_timeout: float = 60.0  # seconds

    def connection_kwargs(self) -> dict:
        """Credentials passed to every new connection."""
        kwargs = {}
        if self.user:
            kwargs["user"] = self.user
        if self.password:
            kwargs["password"] = self.password
        return kwargs


class ColumnMetadata(NamedTuple):
    """Name and position of a result column."""

    name: str
    ordinal: int


@dataclass(frozen=True)
class ExecutionOptions:
    """
    Options controlling statement execution.

    Attributes:
        report_row_counts: Collect one affected-row count per bind set
        commit: Commit after the statement; otherwise roll back
    """

    report_row_counts: bool = False
    commit: bool = False


@dataclass(frozen=True)
class QueryRequest:
    """
    A parameterized statement and its bind values.

    For single execution ``binds`` is one ordered parameter sequence. For
    batch execution it is a sequence of bind sets, one per execution.
    """

    sql: str
    binds: Sequence[Any] = ()
    options: ExecutionOptions = field(default_factory=ExecutionOptions)
    batch: bool = False

    def __post_init__(self):
        expected = count_placeholders(self.sql)
        bind_sets = self.binds if self.batch else [self.binds]
        for position, bind_set in enumerate(bind_sets):
            if len(bind_set) != expected:
                raise ValueError(
                    f"Bind set {position} has {len(bind_set)} value(s) but the "
                    f"statement has {expected} placeholder(s)"
                )

    @classmethod
    def many(
        cls,
        sql: str,
        bind_sets: Sequence[Sequence[Any]],
        options: Optional[ExecutionOptions] = None,
    ) -> "QueryRequest":
        """Build a batch request running ``sql`` once per bind set."""
        return cls(
            sql=sql,
            binds=[tuple(bind_set) for bind_set in bind_sets],
            options=options or ExecutionOptions(),
            batch=True,
        )


@dataclass(frozen=True)
class QueryResult:
    """
    Tabular result of a statement.

    Attributes:
        columns: Column metadata in result order
        rows: Result rows, each with one value per column
        row_counts: Rows affected per bind set (batch execution only)
        rows_affected: Total rows affected, -1 when unknown
    """

    columns: Tuple[ColumnMetadata, ...] = ()
    rows: Tuple[Tuple[Any, ...], ...] = ()
    row_counts: Optional[Tuple[int, ...]] = None
    rows_affected: int = -1

    def __post_init__(self):
        width = len(self.columns)
        for index, row in enumerate(self.rows):
            if len(row) != width:
                raise ValueError(
                    f"Row {index} has {len(row)} value(s), expected {width}"
                )

    @property
    def column_names(self) -> List[str]:
        return [column.name for column in self.columns]
