"""
VisionService implementation backed by the Anthropic Claude API.

The log sheet photo is sent as a base64 image content block followed by
the extraction prompt.  Only png, jpeg, gif and webp are accepted by the
API; anything else is rejected up front with a ValueError.

Reads ANTHROPIC_API_KEY from the environment.

Retries transient errors (rate-limit, overloaded, connection, timeout)
with exponential backoff via tenacity.
"""

from __future__ import annotations

import base64
import logging
from typing import Optional

from anthropic import (
    Anthropic,
    APIConnectionError,
    APITimeoutError,
    RateLimitError,
    InternalServerError,
)
from tenacity import (
    retry,
    stop_after_attempt,
    wait_exponential,
    retry_if_exception_type,
    before_sleep_log,
)

from ai.service import VisionService

logger = logging.getLogger(__name__)

_DEFAULT_MODEL = "claude-sonnet-4-5"

_MAX_RETRIES = 4
_MIN_WAIT_SECONDS = 2
_MAX_WAIT_SECONDS = 60

_RETRYABLE_EXCEPTIONS = (
    APIConnectionError,
    APITimeoutError,
    RateLimitError,
    InternalServerError,
)

_retry_decorator = retry(
    retry=retry_if_exception_type(_RETRYABLE_EXCEPTIONS),
    stop=stop_after_attempt(_MAX_RETRIES),
    wait=wait_exponential(multiplier=1, min=_MIN_WAIT_SECONDS, max=_MAX_WAIT_SECONDS),
    before_sleep=before_sleep_log(logger, logging.WARNING),
    reraise=True,
)

_IMAGE_MIMES = frozenset(
    {
        "image/png",
        "image/jpeg",
        "image/gif",
        "image/webp",
    }
)


class ClaudeService(VisionService):
    """VisionService backed by the Anthropic Claude API."""

    def __init__(self, model: Optional[str] = None):
        self._model = model or _DEFAULT_MODEL
        self._client = Anthropic()  # reads ANTHROPIC_API_KEY from env

    @_retry_decorator
    def complete_with_image(
        self,
        prompt: str,
        image_bytes: bytes,
        mime_type: str = "image/jpeg",
    ) -> str:
        if mime_type not in _IMAGE_MIMES:
            raise ValueError(f"Claude does not accept images of type {mime_type!r}")

        b64_data = base64.standard_b64encode(image_bytes).decode("ascii")
        message = self._client.messages.create(
            model=self._model,
            max_tokens=8192,
            messages=[
                {
                    "role": "user",
                    "content": [
                        {
                            "type": "image",
                            "source": {
                                "type": "base64",
                                "media_type": mime_type,
                                "data": b64_data,
                            },
                        },
                        {"type": "text", "text": prompt},
                    ],
                }
            ],
        )
        return message.content[0].text if message.content else ""
