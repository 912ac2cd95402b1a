"""
Session controller.

``SessionState`` holds everything the UI shows; ``DigitizerController``
is its only writer.  Each public method is one user action.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from capture.stream import CameraStream
from capture.upload import decode_upload
from client.extraction_client import ExtractionClient
from dto.table_data import TableData
from errors import CameraUnavailableError, ExtractionRequestError, SaveRequestError
from export.csv_export import export_filename, table_to_csv
from export.xlsx_export import table_to_xlsx

logger = logging.getLogger(__name__)

CAMERA_ERROR = "Unable to access camera. Please check permissions."
EXTRACTION_ERROR = "Failed to process image. Please try again."
SAVE_ERROR = "Failed to save to database. Please try again."
SAVE_SUCCESS = "Data successfully added to database"


@dataclass
class SessionState:
    captured_image: Optional[str] = None
    extracted_data: Optional[TableData] = None
    error: Optional[str] = None
    notice: Optional[str] = None
    is_processing: bool = False
    show_camera: bool = False


class DigitizerController:

    def __init__(self, camera: CameraStream, client: ExtractionClient) -> None:
        self.state = SessionState()
        self._camera = camera
        self._client = client

    # ------------------------------------------------------------------
    # Capture
    # ------------------------------------------------------------------

    def start_camera(self) -> None:
        try:
            self._camera.start()
        except CameraUnavailableError:
            logger.warning("Camera unavailable", exc_info=True)
            self.state.show_camera = False
            self.state.error = CAMERA_ERROR
            return
        self.state.show_camera = True

    def stop_camera(self) -> None:
        self._camera.stop()
        self.state.show_camera = False

    def capture_photo(self) -> None:
        if not self.state.show_camera:
            return
        try:
            self.state.captured_image = self._camera.snapshot()
        except CameraUnavailableError:
            logger.warning("Snapshot failed", exc_info=True)
            self.state.error = CAMERA_ERROR
        finally:
            self.stop_camera()

    def preview_frame(self) -> Optional[bytes]:
        if not self.state.show_camera:
            return None
        return self._camera.preview_frame()

    def upload_file(
        self,
        data: bytes,
        mime_type: Optional[str] = None,
        filename: Optional[str] = None,
    ) -> None:
        image = decode_upload(data, mime_type=mime_type, filename=filename)
        if image is not None:
            self.state.captured_image = image
            self.state.notice = None

    # ------------------------------------------------------------------
    # Extraction
    # ------------------------------------------------------------------

    def process_image(self) -> None:
        """
        Run extraction on the captured image.

        HTTP and network failures become the generic banner message and
        leave the previous table in place.  A malformed response
        (MalformedTableError) propagates to the caller.
        """
        if not self.state.captured_image or self.state.is_processing:
            return

        self.state.is_processing = True
        self.state.error = None
        self.state.notice = None
        try:
            table = self._client.extract_table(self.state.captured_image)
            self.state.extracted_data = table
        except ExtractionRequestError:
            logger.error("Processing error", exc_info=True)
            self.state.error = EXTRACTION_ERROR
        finally:
            self.state.is_processing = False

    # ------------------------------------------------------------------
    # Export / persist
    # ------------------------------------------------------------------

    def download_csv(self) -> Optional[tuple[str, str]]:
        """Return ``(filename, csv_text)`` or None when there is no table."""
        if self.state.extracted_data is None:
            return None
        return export_filename("csv"), table_to_csv(self.state.extracted_data)

    def download_xlsx(self) -> Optional[tuple[str, bytes]]:
        if self.state.extracted_data is None:
            return None
        return export_filename("xlsx"), table_to_xlsx(self.state.extracted_data)

    def add_to_database(self) -> None:
        if self.state.extracted_data is None:
            return
        self.state.notice = None
        try:
            self._client.save_table(self.state.extracted_data)
        except SaveRequestError:
            logger.error("Save error", exc_info=True)
            self.state.error = SAVE_ERROR
            return
        self.state.error = None
        self.state.notice = SAVE_SUCCESS

    # ------------------------------------------------------------------
    # Reset
    # ------------------------------------------------------------------

    def reset(self) -> None:
        self.state.captured_image = None
        self.state.extracted_data = None
        self.state.error = None
        self.state.notice = None
        self.stop_camera()
