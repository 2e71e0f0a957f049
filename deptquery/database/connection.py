"""
Database connection management module.

This module handles database connection pool creation, scoped connection
checkout, and draining/closing the pool for the department query service.
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, Optional, Set

from psycopg import AsyncConnection
from psycopg_pool import AsyncConnectionPool, PoolTimeout

from ..constants import DEFAULT_POOL_OPEN_TIMEOUT
from ..exceptions import PoolDraining, PoolExhausted, ReleaseError
from ..models import PoolConfig
from .utils import redact_url

logger = logging.getLogger(__name__)


class DatabasePool:
    """
    Bounded connection pool shared by all request handlers.

    Wraps a psycopg ``AsyncConnectionPool`` and adds the bookkeeping the
    service relies on: a count of connections currently checked out,
    refusal of new acquisitions once draining starts, and protection
    against releasing a connection twice.
    """

    def __init__(self, pool: AsyncConnectionPool, acquire_timeout: float, max_size: int):
        """
        Args:
            pool: Opened psycopg connection pool (or a compatible object)
            acquire_timeout: Seconds to wait for a free connection
            max_size: Configured maximum pool size
        """
        self._pool = pool
        self.acquire_timeout = acquire_timeout
        self.max_size = max_size

        self._checked_out: Set[Any] = set()
        self._releasing = 0
        self._draining = False
        self._closed = False
        self._idle = asyncio.Event()
        self._idle.set()
        self._no_release_pending = asyncio.Event()
        self._no_release_pending.set()

    @property
    def outstanding(self) -> int:
        """Number of connections currently checked out."""
        return len(self._checked_out)

    @property
    def is_draining(self) -> bool:
        return self._draining

    @property
    def is_closed(self) -> bool:
        return self._closed

    async def acquire(self) -> AsyncConnection:
        """
        Check out a connection.

        Returns:
            A connection owned by the caller until ``release``

        Raises:
            PoolDraining: If the pool is shutting down
            PoolExhausted: If no connection frees up within the acquire timeout
        """
        if self._draining:
            raise PoolDraining()

        try:
            connection = await self._pool.getconn(timeout=self.acquire_timeout)
        except PoolTimeout as e:
            logger.warning(
                f"Connection pool exhausted: {self.outstanding}/{self.max_size} in use "
                f"after waiting {self.acquire_timeout:g}s"
            )
            raise PoolExhausted(self.acquire_timeout) from e

        self._checked_out.add(connection)
        self._idle.clear()
        logger.debug(
            f"Retrieved database connection from pool ({self.outstanding}/{self.max_size} in use)"
        )
        return connection

    async def release(self, connection: AsyncConnection) -> None:
        """
        Return a connection to the pool.

        The pool discards connections left in a broken state. The return
        itself is shielded so a cancelled caller cannot leak the connection.

        Raises:
            ReleaseError: If the connection is not checked out from this
                pool or the pool failed to take it back
        """
        if connection not in self._checked_out:
            raise ReleaseError(
                RuntimeError("connection is not checked out from this pool")
            )

        self._checked_out.discard(connection)
        self._releasing += 1
        self._no_release_pending.clear()

        # Bookkeeping follows the putconn task, not the caller, so close()
        # still waits for a return whose caller was cancelled
        putback = asyncio.ensure_future(self._pool.putconn(connection))
        putback.add_done_callback(self._release_done)
        try:
            await asyncio.shield(putback)
        except asyncio.CancelledError:
            putback.add_done_callback(_log_abandoned_release)
            raise
        except Exception as e:
            raise ReleaseError(e) from e
        logger.debug("Returned database connection to pool")

    def _release_done(self, putback: asyncio.Future) -> None:
        self._releasing -= 1
        if self._releasing == 0:
            self._no_release_pending.set()
        if not self._checked_out:
            self._idle.set()

    @asynccontextmanager
    async def connection(self) -> AsyncIterator[AsyncConnection]:
        """
        Scoped checkout: the connection is released on every exit path.

        A failed release is logged and never replaces the outcome of the
        block (its return value or the exception it raised).
        """
        connection = await self.acquire()
        try:
            yield connection
        finally:
            try:
                await self.release(connection)
            except ReleaseError as e:
                logger.error(str(e))

    def start_draining(self) -> None:
        """Refuse new acquisitions; checked-out connections are unaffected."""
        if not self._draining:
            logger.info(f"Draining connection pool ({self.outstanding} connection(s) in use)")
        self._draining = True

    async def wait_idle(self, timeout: Optional[float]) -> bool:
        """
        Wait until no connection is checked out.

        Args:
            timeout: Seconds to wait, or None to wait indefinitely

        Returns:
            True if the pool became idle, False if the timeout elapsed
        """
        try:
            await asyncio.wait_for(self._idle.wait(), timeout)
            return True
        except asyncio.TimeoutError:
            return False

    async def close(self, timeout: float = 5.0) -> None:
        """
        Close the underlying pool.

        Any release already in progress is allowed to finish first.
        Calling close more than once is a no-op.
        """
        if self._closed:
            logger.debug("Connection pool already closed, nothing to do")
            return

        self._closed = True
        self._draining = True
        try:
            await asyncio.wait_for(self._no_release_pending.wait(), timeout)
        except asyncio.TimeoutError:
            logger.warning(f"Connection release still pending after {timeout:g}s, closing anyway")

        logger.info("Closing database connection pool")
        await self._pool.close(timeout=timeout)
        logger.info("Database connection pool closed successfully")

    def stats(self) -> Dict[str, Any]:
        """Pool counters for logging."""
        stats = {
            "outstanding": self.outstanding,
            "max_size": self.max_size,
            "draining": self._draining,
        }
        get_stats = getattr(self._pool, "get_stats", None)
        if get_stats is not None:
            stats.update(get_stats())
        return stats


def _log_abandoned_release(putback: asyncio.Future) -> None:
    """Report the outcome of a return whose caller was cancelled."""
    if putback.cancelled():
        return
    error = putback.exception()
    if error is not None:
        logger.error(str(ReleaseError(error)))


async def create_db_connection_pool(
    config: PoolConfig,
    open_timeout: float = DEFAULT_POOL_OPEN_TIMEOUT,
) -> DatabasePool:
    """
    Create and open a database connection pool.

    A probe query runs before returning so an unreachable database fails
    startup instead of the first request.

    Args:
        config: Pool configuration settings
        open_timeout: Seconds allowed for opening the pool and the probe

    Returns:
        Opened DatabasePool

    Raises:
        Exception: If unable to create connection pool
    """
    logger.info(
        f"Creating database connection pool for {redact_url(config.conninfo)} "
        f"(min_size={config.min_size}, max_size={config.max_size})"
    )

    pool = AsyncConnectionPool(
        config.conninfo,
        kwargs=config.connection_kwargs() or None,
        min_size=config.min_size,
        max_size=config.max_size,
        timeout=config.acquire_timeout,
        max_idle=config.idle_timeout,
        name="deptquery",
        open=False,
    )

    try:
        await pool.open(wait=True, timeout=open_timeout)
        async with pool.connection(timeout=open_timeout) as connection:
            await connection.execute("SELECT 1")
    except asyncio.CancelledError:
        logger.info("Database connection pool creation cancelled")
        await pool.close()
        raise
    except Exception as e:
        logger.error(f"Failed to create database connection pool: {str(e)}")
        await pool.close()
        raise

    logger.info("Database connection pool created successfully")
    return DatabasePool(pool, acquire_timeout=config.acquire_timeout, max_size=config.max_size)


async def close_db_connection_pool(pool: Optional[DatabasePool], timeout: float = 5.0) -> None:
    """
    Close the database connection pool.

    Args:
        pool: Database connection pool to close
        timeout: Seconds to wait for pool workers to stop
    """
    if pool is None:
        logger.debug("Connection pool is None, nothing to close")
        return

    try:
        await pool.close(timeout=timeout)
    except Exception as e:
        logger.error(f"Error closing database connection pool: {str(e)}")
