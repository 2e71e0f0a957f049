"""
Exception hierarchy for the department query service.

Routing errors are rendered inline to the HTTP caller, execution errors
wrap the pool and driver failures that can happen around a statement,
and shutdown errors are logged by the shutdown coordinator.
"""

from typing import Optional


class DeptQueryError(Exception):
    """Base class for all service errors."""


class RouteError(DeptQueryError):
    """Raised when a request path cannot be mapped to a department id."""


class NotAnInteger(RouteError):
    """The first path segment is not a base-10 integer."""

    def __init__(self, segment: str):
        self.segment = segment
        super().__init__(f'URL path "{segment}" is not an integer')


class IgnoredPath(RouteError):
    """The path is known but carries no query (e.g. favicon requests)."""

    def __init__(self, segment: str):
        self.segment = segment
        super().__init__(f'URL path "{segment}" is ignored')


class ExecError(DeptQueryError):
    """Raised when a statement could not be executed against the pool."""


class PoolExhausted(ExecError):
    """No connection became available within the acquire timeout."""

    def __init__(self, timeout: float):
        self.timeout = timeout
        super().__init__(f"No database connection available within {timeout:g}s")


class PoolDraining(ExecError):
    """The pool is shutting down and refuses new acquisitions."""

    def __init__(self):
        super().__init__("Database pool is shutting down")


class StatementError(ExecError):
    """The statement failed; the connection was still released."""

    def __init__(self, cause: BaseException, sql: Optional[str] = None):
        self.cause = cause
        self.sql = sql
        super().__init__(f"Statement failed: {cause}")


class ReleaseError(ExecError):
    """Returning a connection to the pool failed."""

    def __init__(self, cause: BaseException):
        self.cause = cause
        super().__init__(f"Failed to return connection to pool: {cause}")


class ServerStartError(DeptQueryError):
    """The HTTP server could not bind or start."""


class ShutdownError(DeptQueryError):
    """Raised for abnormal shutdown paths."""


class ForcedClose(ShutdownError):
    """Connections were still checked out when the grace period elapsed."""

    def __init__(self, outstanding: int, grace_period: float):
        self.outstanding = outstanding
        self.grace_period = grace_period
        super().__init__(
            f"Forcing pool close with {outstanding} connection(s) still in use "
            f"after {grace_period:g}s"
        )
