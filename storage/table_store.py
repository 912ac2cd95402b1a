"""
Append-only JSON-lines store backing ``/api/save-to-database``.
"""

from __future__ import annotations

import logging
import threading
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import List

from dto.api import SavedTable
from dto.table_data import TableData

logger = logging.getLogger(__name__)


class JsonlTableStore:
    """Writes one ``SavedTable`` per line to *path*."""

    def __init__(self, path: str) -> None:
        self._path = Path(path)
        self._lock = threading.Lock()

    @property
    def path(self) -> Path:
        return self._path

    def save(self, table: TableData) -> SavedTable:
        record = SavedTable(
            id=uuid.uuid4().hex,
            saved_at=datetime.now(timezone.utc).isoformat(),
            table=table,
        )
        line = record.model_dump_json()
        with self._lock:
            if self._path.parent and not self._path.parent.exists():
                self._path.parent.mkdir(parents=True, exist_ok=True)
            with open(self._path, "a", encoding="utf-8") as f:
                f.write(line + "\n")
        logger.info(
            "Saved table %s (%d rows) to %s", record.id, len(table.rows), self._path
        )
        return record

    def load_all(self) -> List[SavedTable]:
        if not self._path.is_file():
            return []
        records: List[SavedTable] = []
        with open(self._path, encoding="utf-8") as f:
            for line in f:
                line = line.strip()
                if line:
                    records.append(SavedTable.model_validate_json(line))
        return records
