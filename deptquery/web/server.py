"""HTTP server for department employee lookups.

Serves ``GET /{deptId}``: the department id is parsed from the path, the
employees of that department are fetched through the shared connection
pool and rendered as an HTML table (or JSON with ``?format=json``).

Status codes:
    - 200: Rows rendered (possibly none), or an ignored path such as
      ``/favicon.ico``
    - 400: The path segment is not an integer
    - 500: The statement failed
    - 503: No connection became available in time, or the service is
      shutting down

Error responses still carry the inline error message in the body.

Example:
    >>> server = DepartmentServer(pool=pool, port=7000)
    >>> await server.start()
    >>> # curl http://localhost:7000/90
    >>> await server.stop()
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Optional

from aiohttp import web

from ..constants import (
    DEFAULT_HANDLER_SHUTDOWN_TIMEOUT,
    DEFAULT_HTTP_HOST,
    DEFAULT_HTTP_PORT,
)
from ..database import DatabasePool, fetch_department_employees
from ..exceptions import (
    DeptQueryError,
    ExecError,
    IgnoredPath,
    NotAnInteger,
    PoolDraining,
    PoolExhausted,
    ServerStartError,
)
from ..utils.logging import log_request_event
from .rendering import (
    render_empty,
    render_html,
    render_json,
    render_json_error,
    render_message,
)
from .routing import route

logger = logging.getLogger(__name__)

HTML_CONTENT_TYPE = "text/html"
JSON_CONTENT_TYPE = "application/json"


def _status_for(error: DeptQueryError) -> int:
    if isinstance(error, NotAnInteger):
        return 400
    if isinstance(error, (PoolExhausted, PoolDraining)):
        return 503
    # StatementError and anything unexpected
    return 500


class DepartmentServer:
    """HTTP server answering department lookups from a connection pool.

    The pool is injected; the server never creates or closes it. Shutdown
    is two-step so a coordinator can stop new connections first and tear
    down the remaining request handlers after the pool has drained.

    Attributes:
        pool: Connection pool every request checks a connection out of
        host: Host to bind to
        port: Port to listen on
    """

    def __init__(
        self,
        pool: DatabasePool,
        host: str = DEFAULT_HTTP_HOST,
        port: int = DEFAULT_HTTP_PORT,
        shutdown_timeout: float = DEFAULT_HANDLER_SHUTDOWN_TIMEOUT,
    ) -> None:
        """Initialize the server.

        Args:
            pool: Opened connection pool shared by all requests.
            host: Host to bind to.
            port: Port to listen on.
            shutdown_timeout: Seconds handlers still running at stop() get
                before they are cancelled. The shutdown coordinator has
                already spent the grace period waiting on the pool by then.
        """
        self._pool = pool
        self._host = host
        self._port = port
        self._shutdown_timeout = shutdown_timeout

        self._runner: Optional[web.AppRunner] = None
        self._site: Optional[web.TCPSite] = None
        self._listener: Optional[asyncio.AbstractServer] = None
        self._accepting = False
        self._is_running = False

    @property
    def is_running(self) -> bool:
        return self._is_running

    @property
    def port(self) -> int:
        return self._port

    @property
    def url(self) -> str:
        return f"http://{self._host}:{self._port}"

    def create_app(self) -> web.Application:
        """Build the aiohttp application with the lookup route."""
        app = web.Application()
        app.router.add_get("/{tail:.*}", self.handle_request)
        return app

    async def start(self) -> None:
        """Start listening.

        Calling start() on a running server has no effect.

        Raises:
            ServerStartError: If the server cannot bind or start.
        """
        if self._is_running:
            logger.debug("DepartmentServer already started, skipping")
            return

        try:
            self._runner = web.AppRunner(
                self.create_app(),
                handle_signals=False,
                shutdown_timeout=self._shutdown_timeout,
            )
            await self._runner.setup()
            self._site = web.TCPSite(self._runner, self._host, self._port)
            await self._site.start()
            # aiohttp keeps the listening asyncio server on the site
            self._listener = getattr(self._site, "_server", None)
            self._accepting = True
        except OSError as e:
            error_msg = f"Failed to start HTTP server on {self._host}:{self._port}: {e}"
            logger.error(error_msg)
            await self._cleanup_runner()
            raise ServerStartError(error_msg) from e

        if self._listener is not None and self._listener.sockets:
            # Resolves port 0 to the port actually bound
            self._port = self._listener.sockets[0].getsockname()[1]

        self._is_running = True
        logger.info(f"Server running at {self.url}")

    async def stop_accepting(self) -> None:
        """Close the listening socket without waiting on requests already accepted."""
        if self._listener is not None:
            self._listener.close()
            self._listener = None
            self._accepting = False
        elif self._site is not None and self._accepting:
            try:
                await self._site.stop()
            except Exception as e:
                logger.warning(f"Error stopping HTTP listener during shutdown: {e}")
            self._site = None
            self._accepting = False
        else:
            return
        logger.info("HTTP server stopped accepting connections")

    async def stop(self) -> None:
        """Stop the server; handlers still running after the shutdown timeout are cancelled.

        Errors during cleanup are logged; stop() always leaves the server
        marked as stopped. Calling stop() twice is a no-op.
        """
        if not self._is_running:
            logger.debug("DepartmentServer already stopped, skipping")
            return

        await self.stop_accepting()
        await self._cleanup_runner()
        self._site = None
        self._is_running = False
        logger.info("HTTP server stopped")

    async def _cleanup_runner(self) -> None:
        if self._runner is None:
            return
        try:
            await self._runner.cleanup()
        except Exception as e:
            logger.warning(f"Error cleaning up HTTP runner during shutdown: {e}")
        self._runner = None

    async def handle_request(self, request: web.Request) -> web.Response:
        """Handle ``GET /{deptId}``."""
        start_time = time.time()
        want_json = request.query.get("format", "").lower() == "json"
        dept_id = None

        try:
            dept_id = route(request.path)
            logger.debug(f"Pool before query: {self._pool.stats()}")
            result = await fetch_department_employees(self._pool, dept_id)
        except IgnoredPath:
            log_request_event(request.path, 200, time.time() - start_time, logger=logger)
            return web.Response(body=render_empty(), content_type=HTML_CONTENT_TYPE)
        except NotAnInteger as e:
            message = f"{e}.  Try http://{request.host}/30"
            return self._error_response(request, e, message, want_json, start_time)
        except ExecError as e:
            return self._error_response(request, e, str(e), want_json, start_time, dept_id)

        if want_json:
            body = render_json(result)
            content_type = JSON_CONTENT_TYPE
        else:
            body = render_html(result, heading=f"Employees in Department {dept_id}")
            content_type = HTML_CONTENT_TYPE

        log_request_event(
            request.path,
            200,
            time.time() - start_time,
            dept_id=dept_id,
            row_count=len(result.rows),
            logger=logger,
        )
        return web.Response(body=body, content_type=content_type)

    def _error_response(
        self,
        request: web.Request,
        error: DeptQueryError,
        message: str,
        want_json: bool,
        start_time: float,
        dept_id: Optional[int] = None,
    ) -> web.Response:
        status = _status_for(error)
        logger.error(message)
        log_request_event(
            request.path,
            status,
            time.time() - start_time,
            dept_id=dept_id,
            error=message,
            logger=logger,
        )
        if want_json:
            return web.Response(
                status=status, body=render_json_error(message), content_type=JSON_CONTENT_TYPE
            )
        return web.Response(
            status=status, body=render_message(message), content_type=HTML_CONTENT_TYPE
        )
