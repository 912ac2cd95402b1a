"""
Scoped camera stream.

Every successful ``start`` is paired with exactly one release of the
underlying adapter, no matter whether the stream ends by capture, cancel
or reset.  ``stop`` is the single teardown routine and is idempotent.
"""

from __future__ import annotations

import logging
from typing import Optional

from capture.camera import CameraAdapter
from errors import CameraUnavailableError
from utils.data_url import to_data_url

logger = logging.getLogger(__name__)


class CameraStream:

    def __init__(self, adapter: CameraAdapter) -> None:
        self._adapter = adapter
        self._active = False

    @property
    def active(self) -> bool:
        return self._active

    def start(self) -> None:
        if self._active:
            return
        self._adapter.open()
        self._active = True

    def preview_frame(self) -> Optional[bytes]:
        if not self._active:
            return None
        return self._adapter.read_frame()

    def snapshot(self) -> str:
        """Grab the current frame as a JPEG data URL and stop the stream."""
        if not self._active:
            raise CameraUnavailableError("Camera is not running")
        try:
            frame = self._adapter.read_frame()
        finally:
            self.stop()
        if frame is None:
            raise CameraUnavailableError("Camera did not deliver a frame")
        return to_data_url(frame, "image/jpeg")

    def stop(self) -> None:
        if not self._active:
            return
        self._active = False
        try:
            self._adapter.release()
        except Exception:
            logger.warning("Camera release failed", exc_info=True)

    def __enter__(self) -> "CameraStream":
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.stop()
