"""
Runtime configuration.

Values come from the process environment, after ``.env`` has been loaded
with python-dotenv.  The Gemini key may also live in a separate key file
(``GEMINI_API_KEY=<value>``); it is only ever read on the server side.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

import dotenv

logger = logging.getLogger(__name__)

_TRUE_VALUES = {"1", "true", "yes", "y", "on"}


def parse_bool(value: Any, default: bool) -> bool:
    """Parse flexible boolean inputs from strings or native bools."""
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.strip().lower() in _TRUE_VALUES
    return default


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning("Ignoring non-integer %s=%r, using %d", name, raw, default)
        return default


@dataclass(frozen=True)
class Settings:
    api_base_url: str = "http://127.0.0.1:5000"
    mock_api: bool = False
    ai_provider: str = "gemini"
    gemini_model: Optional[str] = None
    api_key_file: str = ".api_key"
    save_path: str = "saved_tables.jsonl"
    camera_index: int = 0
    jpeg_quality: int = 80
    request_timeout: int = 60
    host: str = "127.0.0.1"
    port: int = 5000


def load_settings() -> Settings:
    dotenv.load_dotenv()
    return Settings(
        api_base_url=os.getenv("API_BASE_URL", Settings.api_base_url).rstrip("/"),
        mock_api=parse_bool(os.getenv("MOCK_API"), False),
        ai_provider=os.getenv("AI_MEDIA_PROVIDER", Settings.ai_provider),
        gemini_model=os.getenv("GEMINI_MODEL") or None,
        api_key_file=os.getenv("API_KEY_FILE", Settings.api_key_file),
        save_path=os.getenv("SAVE_PATH", Settings.save_path),
        camera_index=_int_env("CAMERA_INDEX", Settings.camera_index),
        jpeg_quality=_int_env("JPEG_QUALITY", Settings.jpeg_quality),
        request_timeout=_int_env("REQUEST_TIMEOUT", Settings.request_timeout),
        host=os.getenv("API_HOST", Settings.host),
        port=_int_env("API_PORT", Settings.port),
    )


def read_gemini_api_key(key_file: str = ".api_key") -> Optional[str]:
    """
    Return the Gemini API key.

    ``GEMINI_API_KEY`` in the environment wins; otherwise *key_file* is
    parsed as a dotenv file.  Returns ``None`` if neither has a value.
    """
    key = os.getenv("GEMINI_API_KEY")
    if key and key.strip():
        return key.strip()

    path = Path(key_file)
    if not path.is_file():
        return None

    value = dotenv.dotenv_values(path).get("GEMINI_API_KEY")
    if not value or not value.strip():
        logger.warning("Key file %s has no GEMINI_API_KEY entry", path)
        return None
    return value.strip()
