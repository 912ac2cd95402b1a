"""
Server-side table extractors.

``VisionTableExtractor`` sends the log sheet image to a multimodal LLM and
turns its text answer into a ``TableData``.  ``MockTableExtractor`` returns
a fixed coal production table and is used when the API runs in mock mode.
"""

from __future__ import annotations

import logging
from typing import Any, Dict

from pydantic import ValidationError

from ai.response_parser import parse_llm_json
from ai.service import VisionService
from dto.table_data import TableData
from errors import MalformedTableError

logger = logging.getLogger(__name__)


MOCK_TABLE = TableData(
    headers=["Date", "Shift", "Coal Type", "Quantity (tons)", "Location", "Quality Grade"],
    rows=[
        ["2024-01-15", "Day", "Bituminous", "250", "Pit A", "Grade 1"],
        ["2024-01-15", "Night", "Anthracite", "180", "Pit B", "Grade 2"],
        ["2024-01-16", "Day", "Bituminous", "320", "Pit A", "Grade 1"],
    ],
)


def table_from_llm_text(raw: str) -> TableData:
    """
    Parse model output into a ``TableData``.

    Accepts a bare ``{"headers": [...], "rows": [...]}`` object or one
    wrapped in ``{"tableData": {...}}``.
    """
    parsed = parse_llm_json(raw)
    if not isinstance(parsed, dict):
        raise MalformedTableError("Model output is not a JSON object")

    payload: Dict[str, Any] = parsed
    if "tableData" in payload and isinstance(payload["tableData"], dict):
        payload = payload["tableData"]

    if "headers" not in payload or "rows" not in payload:
        raise MalformedTableError(
            f"Model output is missing headers/rows (keys: {sorted(payload)})"
        )

    try:
        return TableData.model_validate(payload)
    except ValidationError as exc:
        raise MalformedTableError(f"Model output is not a valid table: {exc}") from exc


class VisionTableExtractor:
    """Extracts a table from an image through a ``VisionService``."""

    def __init__(self, service: VisionService) -> None:
        self._service = service

    def extract(
        self, image_bytes: bytes, prompt: str, mime_type: str = "image/jpeg"
    ) -> TableData:
        logger.info(
            "  [Extractor] Sending %d byte %s image to %s",
            len(image_bytes),
            mime_type,
            type(self._service).__name__,
        )
        raw = self._service.complete_with_image(prompt, image_bytes, mime_type=mime_type)
        table = table_from_llm_text(raw)
        logger.info(
            "  [Extractor] -> %d column(s), %d row(s)",
            len(table.headers),
            len(table.rows),
        )
        return table


class MockTableExtractor:
    """Canned extractor for development without a vision backend."""

    def extract(
        self, image_bytes: bytes, prompt: str, mime_type: str = "image/jpeg"
    ) -> TableData:
        logger.info("  [Extractor] Mock mode: returning canned coal log table")
        return MOCK_TABLE.model_copy(deep=True)
