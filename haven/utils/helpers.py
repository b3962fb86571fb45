"""Shared helpers for model output and JSON payloads."""
import json
import re
from typing import Any

_FENCE_RE = re.compile(r"```(?:json)?\s*([\s\S]*?)```")
_OBJECT_RE = re.compile(r"\{[\s\S]*\}")
_ARRAY_RE = re.compile(r"\[[\s\S]*?\]")


def strip_code_fences(text: str | None) -> str:
    """Return the body of a markdown code block if the text has one, else the trimmed text."""
    text = (text or "").strip()
    if "```" in text:
        match = _FENCE_RE.search(text)
        if match:
            return match.group(1).strip()
        return text.replace("```json", "").replace("```", "").strip()
    return text


def parse_json_response(text: str | None) -> Any:
    """Strip fences and parse. Raises json.JSONDecodeError (a ValueError) on bad JSON."""
    return json.loads(strip_code_fences(text))


def extract_json_object(text: str | None) -> dict:
    """Parse the outermost ``{...}`` span found anywhere in the text."""
    match = _OBJECT_RE.search(text or "")
    if not match:
        raise ValueError("No valid JSON in response")
    data = json.loads(match.group(0))
    if not isinstance(data, dict):
        raise ValueError("Expected a JSON object")
    return data


def extract_json_array(text: str | None) -> list | None:
    """Parse the first ``[...]`` span. Return None if there is none or it is not valid JSON."""
    match = _ARRAY_RE.search(text or "")
    if not match:
        return None
    try:
        out = json.loads(match.group(0))
    except (json.JSONDecodeError, TypeError):
        return None
    return out if isinstance(out, list) else None


def to_int_seconds(value: Any, default: int = 0) -> int:
    """Coerce a model-supplied duration to whole seconds."""
    try:
        return int(round(float(value)))
    except (TypeError, ValueError, OverflowError):
        return default


def clamp_percent(value: Any) -> int:
    """Coerce to an integer in 0..100."""
    return max(0, min(100, to_int_seconds(value, 0)))


def vector_literal(values: list[float]) -> str:
    """pgvector text form: ``[0.1,0.2,...]``."""
    return "[" + ",".join(str(v) for v in values) + "]"
