"""
Database utilities module.

This module provides utility functions for database operations including
error classification and connection string redaction.
"""

import re
from urllib.parse import urlparse

_QUOTED_IDENTIFIER_RE = re.compile(r'"[^"]*"\s*')


def classify_database_error(exception: BaseException) -> str:
    """
    Classify database errors into permanent, transient, or systemic categories.

    Args:
        exception: Database exception to classify

    Returns:
        Error type: "permanent", "transient", or "systemic"
    """
    # Postgres quotes object names: 'relation "employees" does not exist'
    error_str = _QUOTED_IDENTIFIER_RE.sub("", str(exception).lower())

    # Errors in the statement or the data it touches
    permanent_indicators = [
        "syntax error",
        "constraint violation",
        "foreign key constraint",
        "check constraint",
        "not null violation",
        "duplicate key",
        "relation does not exist",
        "column does not exist",
        "invalid input syntax",
    ]

    for indicator in permanent_indicators:
        if indicator in error_str:
            return "permanent"

    # Errors that affect every request until configuration changes
    systemic_indicators = [
        "authentication failed",
        "permission denied",
        "role does not exist",
        "database does not exist",
        "ssl required",
        "password authentication failed",
    ]

    for indicator in systemic_indicators:
        if indicator in error_str:
            return "systemic"

    # Connection timeouts, network issues, deadlocks
    return "transient"


def redact_url(url: str) -> str:
    """
    Return a database URL safe for logging (password removed).

    Args:
        url: Database connection URL

    Returns:
        URL with any password replaced by ``***``
    """
    try:
        parsed = urlparse(url)
    except (TypeError, ValueError):
        return "<invalid url>"

    if parsed.password is None:
        return url

    netloc = parsed.netloc.replace(f":{parsed.password}@", ":***@", 1)
    return parsed._replace(netloc=netloc).geturl()
