"""
CSV export of an extracted table.

Cells are joined with bare commas.  Values containing commas, quotes or
newlines are NOT quoted, so such tables do not round-trip through a CSV
reader.
"""

from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Optional

from dto.table_data import TableData


def table_to_csv(table: TableData) -> str:
    lines = [",".join(table.headers)]
    lines.extend(",".join(row) for row in table.rows)
    return "\n".join(lines)


def export_filename(extension: str, today: Optional[date] = None) -> str:
    """``coal-log-<YYYY-MM-DD>.<extension>`` for *today* (defaults to the current UTC date)."""
    today = today or datetime.now(timezone.utc).date()
    return f"coal-log-{today.isoformat()}.{extension}"
