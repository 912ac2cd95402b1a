"""
Utility to render a TableData into an HTML <table> string.
"""

from __future__ import annotations

from typing import List

from dto.table_data import TableData


def _escape_html(text: str) -> str:
    return (
        text.replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
    )


def render_table_html(table: TableData) -> str:
    """
    Render headers as a single ``<thead>`` row and each data row into
    ``<tbody>``.  Cells are emitted as given; ragged rows stay ragged.
    """
    parts: List[str] = ['<table class="extracted" border="1" cellpadding="5" cellspacing="0">']

    if table.headers:
        parts.append("  <thead>")
        parts.append("    <tr>")
        for header in table.headers:
            parts.append(f"      <th>{_escape_html(header)}</th>")
        parts.append("    </tr>")
        parts.append("  </thead>")

    if table.rows:
        parts.append("  <tbody>")
        for row in table.rows:
            parts.append("    <tr>")
            for cell in row:
                parts.append(f"      <td>{_escape_html(cell)}</td>")
            parts.append("    </tr>")
        parts.append("  </tbody>")

    parts.append("</table>")
    return "\n".join(parts)
