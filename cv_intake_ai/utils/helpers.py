"""Helper utilities for the CV Intake AI system."""

import json
import random
import re
import string
import time
from typing import Any, Dict, List, Optional

from cv_intake_ai.utils.errors import LLMResponseError

_BASE36 = string.digits + string.ascii_lowercase

EMAIL_PATTERN = r"\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}\b"


def extract_emails(text: str) -> List[str]:
    """Extract email addresses from text using regex."""
    if not text:
        return []
    return list(dict.fromkeys(re.findall(EMAIL_PATTERN, text)))


def to_base36(value: int) -> str:
    """Non-negative int to lowercase base36."""
    if value < 0:
        raise ValueError("value must be non-negative")
    if value == 0:
        return "0"
    digits = []
    while value:
        value, rem = divmod(value, 36)
        digits.append(_BASE36[rem])
    return "".join(reversed(digits))


def random_base36(length: int = 6) -> str:
    return "".join(random.choices(_BASE36, k=length))


def timestamp_ms() -> int:
    return int(time.time() * 1000)


def parse_llm_json(text: Optional[str]) -> Dict[str, Any]:
    """
    Parse one JSON object from an LLM reply.
    Strips markdown code blocks, then parses the whole reply. If the reply wraps
    the object in prose, decodes exactly one object starting at the first '{'.
    Raises LLMResponseError when no JSON object can be decoded.
    """
    raw = (text or "").strip()
    if not raw:
        raise LLMResponseError("Empty LLM response")
    if raw.startswith("```"):
        raw = re.sub(r"^```(?:json)?\s*", "", raw)
        raw = re.sub(r"\s*```$", "", raw)
    try:
        parsed = json.loads(raw)
    except json.JSONDecodeError:
        start = raw.find("{")
        if start < 0:
            raise LLMResponseError("No JSON object in LLM response")
        try:
            parsed, _ = json.JSONDecoder().raw_decode(raw, start)
        except json.JSONDecodeError as e:
            raise LLMResponseError(f"Malformed JSON in LLM response: {e}") from e
    if not isinstance(parsed, dict):
        raise LLMResponseError(f"Expected a JSON object, got {type(parsed).__name__}")
    return parsed
