from __future__ import annotations

import json
import re

from .error_handler import DecisionParseError

_FENCE_RE = re.compile(r"```(?:json)?\s*(?P<body>.*?)```", re.DOTALL)


def extract_first_json_object(text: str) -> dict:
    """Extract and parse the first JSON object from a model reply.

    Accepts a bare object or one wrapped in a ```json fence. Anything else is
    rejected: the step protocol expects one object per reply.
    """
    candidate_text = text or ""
    fenced = _FENCE_RE.search(candidate_text)
    if fenced:
        candidate_text = fenced.group("body")

    start = candidate_text.find("{")
    end = candidate_text.rfind("}")
    if start == -1 or end == -1 or end <= start:
        raise DecisionParseError("No JSON object found in response.")

    candidate = candidate_text[start : end + 1].strip()
    try:
        data = json.loads(candidate)
    except json.JSONDecodeError as e:
        raise DecisionParseError(f"Invalid JSON: {e}") from e

    if not isinstance(data, dict):
        raise DecisionParseError(f"Expected a JSON object, got {type(data).__name__}")
    return data
