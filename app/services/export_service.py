from __future__ import annotations

import json
import re
import unicodedata
from typing import Any
from urllib.parse import quote

_UNSAFE_FILENAME_CHARS = re.compile(r"[^\w .-]+")


def _safe_name(raw_name: Any, *, ascii_only: bool = False) -> str:
    name = str(raw_name).strip() if raw_name else ""
    if ascii_only:
        name = unicodedata.normalize("NFKD", name).encode("ascii", "ignore").decode("ascii")
    name = _UNSAFE_FILENAME_CHARS.sub("", name).strip(" .")[:120]
    return f"resume-analysis-{name or 'candidate'}.json"


def export_filename(data: dict[str, Any]) -> str:
    return _safe_name(data.get("name"))


def export_content_disposition(data: dict[str, Any]) -> str:
    """Attachment header with an ASCII ``filename`` and an RFC 5987 ``filename*``."""
    fallback = _safe_name(data.get("name"), ascii_only=True)
    filename = export_filename(data)
    return f"attachment; filename=\"{fallback}\"; filename*=UTF-8''{quote(filename)}"


def render_export(data: dict[str, Any]) -> str:
    return json.dumps(data, indent=2, ensure_ascii=False)
