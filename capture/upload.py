"""
Upload handler: turns a user-selected file into the same data-URL form
produced by camera capture.
"""

from __future__ import annotations

import logging
import mimetypes
from pathlib import Path
from typing import Optional

from utils.data_url import to_data_url

logger = logging.getLogger(__name__)


def is_image_mime(mime_type: Optional[str]) -> bool:
    return bool(mime_type) and mime_type.startswith("image/")


def decode_upload(
    data: bytes,
    mime_type: Optional[str] = None,
    filename: Optional[str] = None,
) -> Optional[str]:
    """
    Return ``data:<mime>;base64,...`` for an image upload, or ``None`` if
    the file is not an image.  Rejection is silent apart from a debug log.
    """
    if not mime_type and filename:
        mime_type, _ = mimetypes.guess_type(filename)
    if not is_image_mime(mime_type):
        logger.debug("Ignoring non-image upload %s (%s)", filename, mime_type)
        return None
    return to_data_url(data, mime_type)


def load_image_file(path: str) -> Optional[str]:
    p = Path(path)
    return decode_upload(p.read_bytes(), filename=p.name)
