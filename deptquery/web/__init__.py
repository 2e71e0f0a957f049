#!/usr/bin/env python3
"""
Web package for the department query service.

This package provides request routing, result rendering and the aiohttp
server that ties them to the connection pool.
"""

from .routing import route

from .rendering import (
    render_table,
    render_html,
    render_json,
    render_message,
    render_empty,
)

from .server import DepartmentServer

__all__ = [
    # Routing
    "route",
    # Rendering
    "render_table",
    "render_html",
    "render_json",
    "render_message",
    "render_empty",
    # Server
    "DepartmentServer",
]
