from typing import Optional

from ai.service import VisionService
from ai.openai_service import OpenAIService
from ai.gemini_service import GeminiService
from ai.claude_service import ClaudeService
from config import Settings, read_gemini_api_key


def make_vision_service(provider: str, settings: Optional[Settings] = None) -> VisionService:
    """
    Instantiate the VisionService for a provider name.

      - "gemini"               → GeminiService  (key from env or key file)
      - "claude" / "anthropic" → ClaudeService
      - "openai"               → OpenAIService
    """
    settings = settings or Settings()
    provider = provider.lower().strip()
    if provider == "gemini":
        return GeminiService(
            model=settings.gemini_model,
            api_key=read_gemini_api_key(settings.api_key_file),
        )
    if provider in ("claude", "anthropic"):
        return ClaudeService()
    if provider == "openai":
        return OpenAIService()
    raise ValueError(f"Unknown AI provider: {provider!r}")


def get_vision_service(settings: Settings) -> VisionService:
    """Return the VisionService selected by ``settings.ai_provider`` (AI_MEDIA_PROVIDER)."""
    return make_vision_service(settings.ai_provider, settings)
