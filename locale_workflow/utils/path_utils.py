from __future__ import annotations

import re
from typing import Optional

_FIRST_SEGMENT = re.compile(r"^/([^/]+)")


def slugify(value: Optional[str]) -> str:
    """Lowercase, hyphen-separated URL segment; any other character collapses to one hyphen."""
    raw = str(value or "").strip().lower()
    allowed: list[str] = []
    for ch in raw:
        if ch.isalnum():
            allowed.append(ch)
        else:
            allowed.append("-")
    cleaned = "".join(allowed)
    while "--" in cleaned:
        cleaned = cleaned.replace("--", "-")
    return cleaned.strip("-")


def first_path_segment(slug: Optional[str]) -> Optional[str]:
    """`/en/about` -> `en`; None when the slug has no first segment."""
    if not slug:
        return None
    match = _FIRST_SEGMENT.match(slug)
    return match.group(1) if match else None
