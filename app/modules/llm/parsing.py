"""
Reshaping of LLM text output.

Providers are asked for bare JSON but frequently wrap it in markdown fences or
surround it with prose.
"""

import json
import re
from typing import Any, Dict, List, Optional

_FENCE_RE = re.compile(r"^\s*```[a-zA-Z0-9_-]*\s*\n?|\n?\s*```\s*$")


def strip_code_fences(text: str) -> str:
    if not text:
        return ""
    return _FENCE_RE.sub("", text.strip()).strip()


def _loads(text: str) -> Any:
    try:
        return json.loads(text)
    except (TypeError, ValueError):
        return None


def parse_json_array(text: Optional[str]) -> Optional[List[Any]]:
    """Parse a JSON array from model output, or None when there is none."""
    if not text:
        return None
    value = _loads(strip_code_fences(text))
    if isinstance(value, list):
        return value
    start = text.find("[")
    end = text.rfind("]")
    if start >= 0 and end > start:
        value = _loads(text[start:end + 1])
        if isinstance(value, list):
            return value
    return None


def parse_json_object(text: Optional[str]) -> Optional[Dict[str, Any]]:
    """Parse the outermost JSON object from model output, or None."""
    if not text:
        return None
    value = _loads(strip_code_fences(text))
    if isinstance(value, dict):
        return value
    start = text.find("{")
    end = text.rfind("}")
    if start >= 0 and end > start:
        value = _loads(text[start:end + 1])
        if isinstance(value, dict):
            return value
    return None
