from abc import ABC, abstractmethod


class VisionService(ABC):
    """
    Base class for multimodal LLM backends used for table extraction.

    Implementations send one image plus a text prompt and return the raw
    model text; turning that text into a table is the caller's job.
    """

    @abstractmethod
    def complete_with_image(
        self, prompt: str, image_bytes: bytes, mime_type: str = "image/jpeg"
    ) -> str:
        """Send an image together with a text prompt and return the LLM response."""
        ...
