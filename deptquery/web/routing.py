"""
Request routing for the department lookup page.

Maps a request path such as ``/90`` to the department id it names.
"""

import re

from ..exceptions import IgnoredPath, NotAnInteger

IGNORED_SEGMENTS = frozenset({"favicon.ico"})

_INTEGER_RE = re.compile(r"[+-]?[0-9]+")


def route(path: str) -> int:
    """
    Parse the department id from the first path segment.

    Only the shape of the segment is checked; whether the department
    exists is answered by the query returning rows or not.

    Args:
        path: Request path, e.g. ``/90``

    Returns:
        Department id

    Raises:
        IgnoredPath: For paths that carry no query (favicon requests)
        NotAnInteger: If the first segment is not a base-10 integer
    """
    if path.startswith("/"):
        path = path[1:]
    segment = path.split("/", 1)[0]

    if segment in IGNORED_SEGMENTS:
        raise IgnoredPath(segment)

    if not _INTEGER_RE.fullmatch(segment):
        raise NotAnInteger(segment)

    return int(segment)
