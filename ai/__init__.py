from ai.service import VisionService
from ai.factory import get_vision_service, make_vision_service
from ai.response_parser import parse_llm_json

__all__ = [
    "VisionService",
    "get_vision_service",
    "make_vision_service",
    "parse_llm_json",
]
