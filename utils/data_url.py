"""
Helpers for ``data:<mime>;base64,<payload>`` image URLs.
"""

from __future__ import annotations

import base64
from typing import Tuple


def to_data_url(data: bytes, mime_type: str) -> str:
    return f"data:{mime_type};base64,{base64.b64encode(data).decode('ascii')}"


def strip_data_url_prefix(data_url: str) -> str:
    """Return the payload after the first comma (the whole string if there is none)."""
    _, sep, payload = data_url.partition(",")
    return payload if sep else data_url


def data_url_mime_type(data_url: str, default: str = "image/jpeg") -> str:
    if not data_url.startswith("data:"):
        return default
    header = data_url[len("data:"):].split(",", 1)[0]
    mime = header.split(";", 1)[0]
    return mime or default


def split_data_url(data_url: str) -> Tuple[str, bytes]:
    """Return ``(mime_type, raw_bytes)`` for a base64 data URL."""
    mime = data_url_mime_type(data_url)
    payload = strip_data_url_prefix(data_url)
    return mime, base64.b64decode(payload, validate=True)
