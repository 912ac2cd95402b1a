"""
HTTP client for the two backend endpoints.

No retries: a failed call is reported once and the caller decides what to
show the user.
"""

from __future__ import annotations

import logging
from typing import Optional

import requests
from pydantic import ValidationError

from dto.api import ProcessTableRequest, ProcessTableResponse
from dto.table_data import TableData
from errors import ExtractionRequestError, MalformedTableError, SaveRequestError
from prompts.extraction import get_extraction_prompt
from utils.data_url import data_url_mime_type, strip_data_url_prefix

logger = logging.getLogger(__name__)

PROCESS_TABLE_PATH = "/api/process-table"
SAVE_TO_DATABASE_PATH = "/api/save-to-database"


class ExtractionClient:

    def __init__(
        self,
        base_url: str,
        timeout: float = 60,
        session: Optional[requests.Session] = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._session = session or requests.Session()

    def extract_table(self, captured_image: str, prompt: Optional[str] = None) -> TableData:
        """
        Send a captured data-URL image to ``/api/process-table``.

        Raises ExtractionRequestError on network failure or non-2xx status,
        MalformedTableError when the body is not ``{"tableData": {...}}``.
        """
        body = ProcessTableRequest(
            image=strip_data_url_prefix(captured_image),
            prompt=prompt or get_extraction_prompt(),
            mime_type=data_url_mime_type(captured_image),
        )
        url = self._base_url + PROCESS_TABLE_PATH
        try:
            response = self._session.post(
                url, json=body.model_dump(), timeout=self._timeout
            )
        except requests.RequestException as exc:
            raise ExtractionRequestError(f"POST {url} failed: {exc}") from exc

        if not response.ok:
            raise ExtractionRequestError(
                f"POST {url} returned HTTP {response.status_code}"
            )

        try:
            parsed = ProcessTableResponse.model_validate(response.json())
        except (ValueError, ValidationError) as exc:
            raise MalformedTableError(f"Unexpected response from {url}: {exc}") from exc

        logger.info(
            "Extracted table: %d column(s), %d row(s)",
            len(parsed.table_data.headers),
            len(parsed.table_data.rows),
        )
        return parsed.table_data

    def save_table(self, table: TableData) -> None:
        """POST the table to ``/api/save-to-database``; any 2xx counts as saved."""
        url = self._base_url + SAVE_TO_DATABASE_PATH
        try:
            response = self._session.post(
                url, json=table.model_dump(), timeout=self._timeout
            )
        except requests.RequestException as exc:
            raise SaveRequestError(f"POST {url} failed: {exc}") from exc

        if not response.ok:
            raise SaveRequestError(f"POST {url} returned HTTP {response.status_code}")
        logger.info("Saved table with %d row(s)", len(table.rows))
