"""
Excel export of an extracted table via openpyxl.
"""

from __future__ import annotations

import io

import openpyxl
from openpyxl.styles import Font
from openpyxl.utils import get_column_letter

from dto.table_data import TableData

_MAX_COLUMN_WIDTH = 50


def table_to_xlsx(table: TableData, sheet_title: str = "Coal Log") -> bytes:
    """Return the table as .xlsx bytes: bold header row, then one row per data row."""
    wb = openpyxl.Workbook()
    ws = wb.active
    ws.title = sheet_title

    ws.append(list(table.headers))
    for cell in ws[1]:
        cell.font = Font(bold=True)
    for row in table.rows:
        ws.append(list(row))

    width = max([len(table.headers)] + [len(r) for r in table.rows])
    for col_idx in range(1, width + 1):
        values = [table.headers[col_idx - 1]] if col_idx <= len(table.headers) else []
        values += [r[col_idx - 1] for r in table.rows if col_idx <= len(r)]
        longest = max((len(v) for v in values), default=0)
        ws.column_dimensions[get_column_letter(col_idx)].width = min(
            longest + 2, _MAX_COLUMN_WIDTH
        )

    buf = io.BytesIO()
    wb.save(buf)
    wb.close()
    return buf.getvalue()
