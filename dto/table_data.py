from typing import Any, List

from pydantic import BaseModel, field_validator


def _cell_to_str(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    return value


class TableData(BaseModel):
    """Headers plus rows of a table extracted from a log sheet image.

    Row length is not checked against the header count; vision models
    regularly return ragged rows for handwritten sheets.
    """
    headers: List[str] = []
    rows: List[List[str]] = []

    @field_validator("headers", mode="before")
    @classmethod
    def _coerce_headers(cls, value: Any) -> Any:
        if isinstance(value, list):
            return [_cell_to_str(v) for v in value]
        return value

    @field_validator("rows", mode="before")
    @classmethod
    def _coerce_rows(cls, value: Any) -> Any:
        if isinstance(value, list):
            return [
                [_cell_to_str(v) for v in row] if isinstance(row, list) else row
                for row in value
            ]
        return value
