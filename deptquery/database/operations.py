"""
Database operations module.

This module runs parameterized statements on pooled connections. Every
statement runs inside the pool's scoped checkout so the connection goes
back to the pool whether the statement succeeds, fails or is cancelled.
"""

import logging
import time
from typing import Iterable, List, Optional, Tuple

import psycopg

from ..constants import DELETE_CHILDREN_SQL, EMPLOYEES_BY_DEPARTMENT_SQL
from ..exceptions import StatementError
from ..models import ColumnMetadata, ExecutionOptions, QueryRequest, QueryResult
from ..utils.logging import log_batch_rowcounts
from .connection import DatabasePool
from .schema import (
    DEMO_CHILDREN,
    DEMO_EMPLOYEES,
    DEMO_PARENTS,
    DEMO_SCHEMA_DDL,
    INSERT_CHILD_SQL,
    INSERT_EMPLOYEE_SQL,
    INSERT_PARENT_SQL,
)
from .utils import classify_database_error

logger = logging.getLogger(__name__)


async def execute_query(pool: DatabasePool, request: QueryRequest) -> QueryResult:
    """
    Execute a single parameterized statement.

    Batch requests are delegated to ``execute_batch``.

    Args:
        pool: Connection pool to check a connection out of
        request: Statement, binds and execution options

    Returns:
        QueryResult with column metadata and rows (empty for DML)

    Raises:
        PoolExhausted: If no connection became available in time
        PoolDraining: If the pool is shutting down
        StatementError: If the statement failed
    """
    if request.batch:
        return await execute_batch(pool, request)

    async with pool.connection() as connection:
        try:
            async with connection.cursor() as cursor:
                await cursor.execute(request.sql, request.binds or None)
                columns, rows = await _collect_rows(cursor)
                rows_affected = cursor.rowcount
            await _finish(connection, request.options)
        except psycopg.Error as e:
            await _rollback_after_error(connection)
            logger.error(
                f"Database error ({classify_database_error(e)}) executing statement: {str(e)}"
            )
            raise StatementError(e, sql=request.sql) from e

    return QueryResult(columns=columns, rows=rows, rows_affected=rows_affected)


async def execute_batch(pool: DatabasePool, request: QueryRequest) -> QueryResult:
    """
    Execute one statement once per bind set.

    With ``report_row_counts`` the result carries one affected-row count
    per bind set, in bind-set order. Bind sets matching no rows report 0.

    Args:
        pool: Connection pool to check a connection out of
        request: Batch request built with ``QueryRequest.many``

    Returns:
        QueryResult with ``row_counts`` (when requested) and ``rows_affected``

    Raises:
        PoolExhausted: If no connection became available in time
        PoolDraining: If the pool is shutting down
        StatementError: If any execution in the batch failed
    """
    bind_sets = list(request.binds)
    report = request.options.report_row_counts
    row_counts: Optional[List[int]] = None

    async with pool.connection() as connection:
        try:
            async with connection.cursor() as cursor:
                if not bind_sets:
                    row_counts = [] if report else None
                    rows_affected = 0
                elif report:
                    await cursor.executemany(request.sql, bind_sets, returning=True)
                    row_counts = _collect_row_counts(cursor)
                    rows_affected = sum(row_counts)
                else:
                    await cursor.executemany(request.sql, bind_sets)
                    rows_affected = cursor.rowcount
            await _finish(connection, request.options)
        except psycopg.Error as e:
            await _rollback_after_error(connection)
            logger.error(
                f"Database error ({classify_database_error(e)}) executing batch of "
                f"{len(bind_sets)}: {str(e)}"
            )
            raise StatementError(e, sql=request.sql) from e

    if row_counts is not None and len(row_counts) != len(bind_sets):
        logger.warning(
            f"Driver reported {len(row_counts)} row count(s) for {len(bind_sets)} bind set(s)"
        )

    return QueryResult(
        row_counts=tuple(row_counts) if row_counts is not None else None,
        rows_affected=rows_affected,
    )


async def fetch_department_employees(pool: DatabasePool, dept_id: int) -> QueryResult:
    """Look up the employees of one department."""
    return await execute_query(pool, QueryRequest(EMPLOYEES_BY_DEPARTMENT_SQL, (dept_id,)))


async def delete_children_with_rowcounts(
    pool: DatabasePool,
    parent_ids: Iterable[int],
    commit: bool = False,
) -> QueryResult:
    """
    Delete child rows for each parent id, reporting rows deleted per id.

    Args:
        pool: Connection pool
        parent_ids: Parent ids, one execution each
        commit: Commit the deletes; by default they are rolled back

    Returns:
        QueryResult whose ``row_counts`` lines up with ``parent_ids``
    """
    parent_ids = list(parent_ids)
    request = QueryRequest.many(
        DELETE_CHILDREN_SQL,
        [[parent_id] for parent_id in parent_ids],
        ExecutionOptions(report_row_counts=True, commit=commit),
    )

    start_time = time.time()
    result = await execute_batch(pool, request)
    log_batch_rowcounts(
        sql=request.sql,
        bind_sets=request.binds,
        row_counts=result.row_counts or (),
        committed=commit,
        duration=time.time() - start_time,
        logger=logger,
    )
    return result


async def seed_demo_schema(pool: DatabasePool) -> None:
    """
    Create and populate the demo tables, replacing any existing ones.

    Raises:
        StatementError: If any DDL or insert failed (nothing is committed)
    """
    async with pool.connection() as connection:
        try:
            async with connection.cursor() as cursor:
                for statement in DEMO_SCHEMA_DDL:
                    await cursor.execute(statement)
                await cursor.executemany(INSERT_EMPLOYEE_SQL, DEMO_EMPLOYEES)
                await cursor.executemany(INSERT_PARENT_SQL, DEMO_PARENTS)
                await cursor.executemany(INSERT_CHILD_SQL, DEMO_CHILDREN)
            await connection.commit()
        except psycopg.Error as e:
            await _rollback_after_error(connection)
            logger.error(f"Failed to seed demo schema: {str(e)}")
            raise StatementError(e) from e

    logger.info(
        f"Seeded demo schema: {len(DEMO_EMPLOYEES)} employees, "
        f"{len(DEMO_PARENTS)} parents, {len(DEMO_CHILDREN)} children"
    )


async def _collect_rows(cursor) -> Tuple[Tuple[ColumnMetadata, ...], Tuple[tuple, ...]]:
    """Column metadata and rows of the current result; empty for DML."""
    if cursor.description is None:
        return (), ()

    columns = tuple(
        ColumnMetadata(name=column.name, ordinal=ordinal)
        for ordinal, column in enumerate(cursor.description)
    )
    rows = tuple(tuple(row) for row in await cursor.fetchall())
    return columns, rows


def _collect_row_counts(cursor) -> List[int]:
    """One rowcount per result set produced by ``executemany(returning=True)``."""
    counts = []
    while True:
        counts.append(max(cursor.rowcount, 0))
        if not cursor.nextset():
            break
    return counts


async def _finish(connection, options: ExecutionOptions) -> None:
    if options.commit:
        await connection.commit()
    else:
        await connection.rollback()


async def _rollback_after_error(connection) -> None:
    try:
        await connection.rollback()
    except psycopg.Error as e:
        # The pool discards connections it cannot reset
        logger.warning(f"Rollback after statement error failed: {str(e)}")
