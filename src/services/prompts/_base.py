"""Shared helpers for reading model responses."""

import json
from typing import Any, Optional


def strip_markdown_code_blocks(text: str) -> str:
    """Strip markdown code fences from AI response text.

    Args:
        text: Raw text that may be wrapped in ```json ... ``` fences

    Returns:
        Cleaned text with the fences removed
    """
    text = text.strip()
    if text.startswith("```json"):
        text = text[7:]
    elif text.startswith("```"):
        text = text[3:]
    if text.endswith("```"):
        text = text[:-3]
    return text.strip()


def load_json_object(text: Optional[str]) -> Optional[dict[str, Any]]:
    """Parse a JSON object out of a model response, or return None.

    Falls back to the outermost ``{...}`` span when the model wrapped the
    object in prose.
    """
    if not text or not text.strip():
        return None
    cleaned = strip_markdown_code_blocks(text)
    candidates = [cleaned]
    start, end = cleaned.find("{"), cleaned.rfind("}")
    if 0 <= start < end:
        candidates.append(cleaned[start:end + 1])

    for candidate in candidates:
        try:
            data = json.loads(candidate)
        except (json.JSONDecodeError, ValueError):
            continue
        if isinstance(data, dict):
            return data
    return None
