"""
Shutdown coordination for the department query service.

This module turns termination signals into an orderly shutdown: stop
handing out connections, let in-flight requests finish for a bounded
grace period, close the pool and stop the HTTP server. The process exits
with code 0 whether the pool drained cleanly or had to be forced closed.
"""

import asyncio
import logging
import signal
from enum import Enum
from typing import Optional, Protocol, Sequence

from ..constants import DEFAULT_SHUTDOWN_GRACE_PERIOD
from ..database import DatabasePool
from ..exceptions import ForcedClose
from ..utils.logging import log_shutdown_event

logger = logging.getLogger(__name__)

DEFAULT_SIGNALS = (signal.SIGINT, signal.SIGTERM)


class ShutdownState(Enum):
    """Lifecycle states of the service."""

    RUNNING = "running"
    DRAINING = "draining"
    STOPPED = "stopped"


class StoppableServer(Protocol):
    """Server interface used during shutdown."""

    async def stop_accepting(self) -> None: ...

    async def stop(self) -> None: ...


class ShutdownCoordinator:
    """
    State machine driving shutdown: RUNNING -> DRAINING -> STOPPED.

    The first shutdown request starts the drain; any further request
    (e.g. a second Ctrl+C) is logged and ignored, so the pool is never
    closed twice.
    """

    def __init__(
        self,
        pool: DatabasePool,
        grace_period: float = DEFAULT_SHUTDOWN_GRACE_PERIOD,
        server: Optional[StoppableServer] = None,
    ):
        """
        Initialize the coordinator.

        Args:
            pool: Connection pool to drain and close
            grace_period: Seconds to wait for checked-out connections
            server: Optional HTTP server to stop
        """
        self._pool = pool
        self._grace_period = grace_period
        self._server = server

        self._state = ShutdownState.RUNNING
        self._stopped = asyncio.Event()
        self._drain_task: Optional[asyncio.Task] = None
        self._installed_signals: Sequence[signal.Signals] = ()
        self.forced_close: Optional[ForcedClose] = None

    @property
    def forced(self) -> bool:
        """Whether the pool was closed with connections still checked out."""
        return self.forced_close is not None

    @property
    def state(self) -> ShutdownState:
        return self._state

    def install_signal_handlers(
        self,
        signals: Sequence[signal.Signals] = DEFAULT_SIGNALS,
        loop: Optional[asyncio.AbstractEventLoop] = None,
    ) -> None:
        """Route the given signals to ``request_shutdown`` on the running loop."""
        loop = loop or asyncio.get_running_loop()
        for sig in signals:
            loop.add_signal_handler(sig, self.request_shutdown, sig.name)
        self._installed_signals = tuple(signals)
        logger.debug(f"Shutdown handlers installed for {[sig.name for sig in signals]}")

    def remove_signal_handlers(self, loop: Optional[asyncio.AbstractEventLoop] = None) -> None:
        loop = loop or asyncio.get_running_loop()
        for sig in self._installed_signals:
            loop.remove_signal_handler(sig)
        self._installed_signals = ()

    def request_shutdown(self, signal_name: Optional[str] = None) -> Optional[asyncio.Task]:
        """
        Begin shutdown; safe to call any number of times.

        Must be called from the event loop thread (signal handlers
        installed with ``install_signal_handlers`` are).

        Args:
            signal_name: Name of the triggering signal, for logging

        Returns:
            The drain task
        """
        if self._state is not ShutdownState.RUNNING:
            logger.info(
                f"Shutdown already {self._state.value}, ignoring {signal_name or 'request'}"
            )
            return self._drain_task

        logger.info("Terminating")
        self._state = ShutdownState.DRAINING
        log_shutdown_event(
            ShutdownState.DRAINING.value,
            outstanding=self._pool.outstanding,
            signal_name=signal_name,
            logger=logger,
        )
        self._drain_task = asyncio.get_running_loop().create_task(self._drain())
        return self._drain_task

    async def shutdown(self, signal_name: Optional[str] = None) -> None:
        """Request shutdown and wait until it has completed."""
        self.request_shutdown(signal_name)
        await self.wait_stopped()

    async def wait_stopped(self) -> None:
        """Block until the coordinator reaches STOPPED."""
        await self._stopped.wait()

    async def _drain(self) -> None:
        try:
            self._pool.start_draining()
            if self._server is not None:
                await self._step("stopping listener", self._server.stop_accepting)

            try:
                await self._wait_for_idle()
            except ForcedClose as e:
                self.forced_close = e
                logger.warning(str(e))

            # Pool and server are closed even if an earlier step failed
            await self._step("closing connection pool", self._pool.close)
            if self._server is not None:
                await self._step("stopping server", self._server.stop)
        finally:
            self._state = ShutdownState.STOPPED
            log_shutdown_event(
                ShutdownState.STOPPED.value,
                outstanding=self._pool.outstanding,
                forced=self.forced,
                logger=logger,
            )
            self._stopped.set()

    async def _wait_for_idle(self) -> None:
        """
        Wait up to the grace period for every connection to be returned.

        Raises:
            ForcedClose: If connections are still checked out afterwards
        """
        if not await self._pool.wait_idle(self._grace_period):
            raise ForcedClose(self._pool.outstanding, self._grace_period)

    @staticmethod
    async def _step(description: str, action) -> None:
        try:
            await action()
        except Exception as e:
            logger.error(f"Error during shutdown while {description}: {e}")
