"""
Result rendering for the department lookup page.

Turns a QueryResult into an HTML page or a JSON document. All functions
here are pure: no I/O and no mutation of their input.
"""

import json
from html import escape
from typing import Any, Iterable, Optional

from ..constants import PAGE_CAPTION, PAGE_TITLE
from ..models import QueryResult

PAGE_STYLE = (
    "body {background:#FFFFFF;color:#000000;font-family:Arial,sans-serif;"
    "margin:40px;padding:10px;font-size:12px;text-align:center;}"
    "h1 {margin:0px;margin-bottom:12px;background:#336791;text-align:center;"
    "color:#FFFFFF;font-size:28px;}"
    "table {border-collapse: collapse; margin-left:auto; margin-right:auto;}"
    "td, th {padding:8px;border-style:solid}"
)


def _cell(value: Any) -> str:
    if value is None:
        return ""
    return escape(str(value))


def render_table(result: QueryResult) -> str:
    """
    Render a result as an HTML table fragment.

    Emits one header row (one ``<th>`` per column, in column order) and one
    ``<tr>`` per result row with one ``<td>`` per value. NULL values render
    as empty cells.
    """
    parts = ["<table>", "<tr>"]
    parts.extend(f"<th>{escape(name)}</th>" for name in result.column_names)
    parts.append("</tr>")

    for row in result.rows:
        parts.append("<tr>")
        parts.extend(f"<td>{_cell(value)}</td>" for value in row)
        parts.append("</tr>")

    parts.append("</table>")
    return "".join(parts)


def render_page(
    body_parts: Iterable[str] = (),
    title: str = PAGE_TITLE,
    caption: str = PAGE_CAPTION,
) -> bytes:
    """Wrap already-escaped HTML fragments in the page header and footer."""
    parts = [
        "<!DOCTYPE html>",
        "<html>",
        "<head>",
        f"<style>{PAGE_STYLE}</style>\n",
        f"<title>{escape(caption)}</title>",
        "</head>",
        "<body>",
        f"<h1>{escape(title)}</h1>",
    ]
    parts.extend(body_parts)
    parts.append("</body>\n</html>")
    return "".join(parts).encode("utf-8")


def render_html(result: QueryResult, heading: Optional[str] = None) -> bytes:
    """
    Render a result as a complete HTML page.

    Args:
        result: Query result to render
        heading: Optional heading shown above the table

    Returns:
        UTF-8 encoded HTML document
    """
    body = []
    if heading:
        body.append(f"<h2>{escape(heading)}</h2>")
    body.append(render_table(result))
    return render_page(body)


def render_message(text: str) -> bytes:
    """Render a page carrying an inline error message."""
    return render_page([f"<p>Error: {escape(text)}</p>"])


def render_empty() -> bytes:
    """Render the page header and footer only."""
    return render_page()


def render_json(result: QueryResult) -> bytes:
    """
    Render a result as a JSON document.

    Values JSON cannot represent directly (dates, decimals) are rendered
    with ``str``.
    """
    document = {
        "columns": result.column_names,
        "rows": [list(row) for row in result.rows],
        "row_counts": list(result.row_counts) if result.row_counts is not None else None,
    }
    return json.dumps(document, ensure_ascii=False, default=str).encode("utf-8")


def render_json_error(text: str) -> bytes:
    """Render an error message as a JSON document."""
    return json.dumps({"error": text}, ensure_ascii=False).encode("utf-8")
