"""
Prompt sent with every log sheet image.
"""

from __future__ import annotations

EXTRACTION_PROMPT = (
    "Extract all table data from this coal log book image. "
    "Return the data in JSON format with 'headers' array and 'rows' array. "
    "Each row should be an array of cell values. "
    "Focus on coal-related data like date, shift, coal type, quantity, location, etc."
)


def get_extraction_prompt() -> str:
    return EXTRACTION_PROMPT
