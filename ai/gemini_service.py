import logging
from typing import Optional

from google import genai
from google.genai import errors as genai_errors
from google.genai import types

from tenacity import (
    retry,
    stop_after_attempt,
    wait_exponential,
    retry_if_exception_type,
    before_sleep_log,
)

from ai.service import VisionService

logger = logging.getLogger(__name__)

_DEFAULT_MODEL = "gemini-2.5-flash"

_MAX_RETRIES = 4
_MIN_WAIT_SECONDS = 2
_MAX_WAIT_SECONDS = 60

_RETRYABLE_EXCEPTIONS = (ConnectionError, genai_errors.ServerError)

_retry_decorator = retry(
    retry=retry_if_exception_type(_RETRYABLE_EXCEPTIONS),
    stop=stop_after_attempt(_MAX_RETRIES),
    wait=wait_exponential(multiplier=1, min=_MIN_WAIT_SECONDS, max=_MAX_WAIT_SECONDS),
    before_sleep=before_sleep_log(logger, logging.WARNING),
    reraise=True,
)


class GeminiService(VisionService):
    """VisionService backed by the Google Gemini API."""

    def __init__(self, model: Optional[str] = None, api_key: Optional[str] = None):
        self._model = model or _DEFAULT_MODEL
        # Without an explicit key the client reads GEMINI_API_KEY / GOOGLE_API_KEY
        self._client = genai.Client(api_key=api_key) if api_key else genai.Client()

    @_retry_decorator
    def complete_with_image(
        self, prompt: str, image_bytes: bytes, mime_type: str = "image/jpeg"
    ) -> str:
        image_part = types.Part.from_bytes(data=image_bytes, mime_type=mime_type)
        response = self._client.models.generate_content(
            model=self._model,
            contents=[prompt, image_part],
            config=types.GenerateContentConfig(
                response_mime_type="application/json",
            ),
        )
        logger.debug("  [Gemini] %s returned %d chars", self._model, len(response.text or ""))
        return response.text or ""
