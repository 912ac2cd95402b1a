"""
Camera adapters.

``CameraAdapter`` is the seam between the capture stream and the hardware:
``open`` acquires the device, ``read_frame`` returns the current frame as
JPEG bytes, ``release`` gives the device back.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Optional

import cv2
import numpy as np

from errors import CameraUnavailableError

logger = logging.getLogger(__name__)


class CameraAdapter(ABC):

    @abstractmethod
    def open(self) -> None:
        """Acquire the device.  Raises CameraUnavailableError on failure."""
        ...

    @abstractmethod
    def read_frame(self) -> Optional[bytes]:
        """Capture one frame.  Returns JPEG bytes or None on failure."""
        ...

    @abstractmethod
    def release(self) -> None:
        ...


class OpenCVCamera(CameraAdapter):
    """Camera adapter on top of ``cv2.VideoCapture``."""

    def __init__(self, index: int = 0, jpeg_quality: int = 80) -> None:
        self._index = index
        self._jpeg_quality = jpeg_quality
        self._capture: Optional[cv2.VideoCapture] = None

    def open(self) -> None:
        capture = cv2.VideoCapture(self._index)
        if not capture.isOpened():
            capture.release()
            raise CameraUnavailableError(f"Camera {self._index} could not be opened")
        self._capture = capture
        logger.info("Opened camera %d", self._index)

    def read_frame(self) -> Optional[bytes]:
        if self._capture is None:
            return None
        ok, frame = self._capture.read()
        if not ok or not isinstance(frame, np.ndarray) or frame.size == 0:
            logger.warning("Camera %d returned no frame", self._index)
            return None
        ok, encoded = cv2.imencode(
            ".jpg", frame, [int(cv2.IMWRITE_JPEG_QUALITY), self._jpeg_quality]
        )
        if not ok:
            logger.warning("JPEG encoding of camera frame failed")
            return None
        return encoded.tobytes()

    def release(self) -> None:
        if self._capture is not None:
            self._capture.release()
            self._capture = None
            logger.info("Released camera %d", self._index)
