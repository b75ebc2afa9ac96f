from __future__ import annotations

import json
import re
from typing import Any

from app.ai.types import AIResponseError

_OBJECT_RE = re.compile(r"\{[\s\S]*\}")
_FENCE_RE = re.compile(r"^```(?:json)?\s*|\s*```$", re.IGNORECASE)


def _strip_fences(content: str) -> str:
    return _FENCE_RE.sub("", content.strip())


def parse_json_content(content: str) -> dict[str, Any]:
    """Parse a JSON object out of a model reply.

    Models often wrap the object in prose or a markdown fence. The reply is
    tried as-is first, then the widest ``{...}`` span is tried.
    """
    text = _strip_fences(content or "")
    try:
        parsed = json.loads(text)
    except json.JSONDecodeError:
        match = _OBJECT_RE.search(text)
        if not match:
            raise AIResponseError("Failed to parse JSON from model response") from None
        try:
            parsed = json.loads(match.group(0))
        except json.JSONDecodeError as exc:
            raise AIResponseError("Failed to parse JSON from model response") from exc

    if not isinstance(parsed, dict):
        raise AIResponseError("Model response JSON is not an object")
    return parsed
