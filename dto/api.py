"""
Wire DTOs for the two backend endpoints.

    POST /api/process-table      ProcessTableRequest  -> ProcessTableResponse
    POST /api/save-to-database   TableData            -> SaveResult
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from dto.table_data import TableData


class ProcessTableRequest(BaseModel):
    image: str  # base64 payload, data-URL prefix already stripped
    prompt: str
    mime_type: str = "image/jpeg"


class ProcessTableResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    table_data: TableData = Field(alias="tableData")


class SaveResult(BaseModel):
    success: bool = True
    id: Optional[str] = None


class SavedTable(BaseModel):
    """One persisted table, as written to the JSON-lines store."""
    id: str
    saved_at: str
    table: TableData
