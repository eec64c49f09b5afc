"""
Area walking.

An area is any mapping with `type == "area"`; its `items` are widgets.
Areas can sit anywhere in a doc: top-level properties, array elements, or
inside widgets of other areas. Properties starting with `_` are skipped.
"""

from __future__ import annotations

from typing import Any, Iterator, List, Mapping, MutableMapping, Tuple

AREA_TYPE = "area"


def is_area(value: Any) -> bool:
    return isinstance(value, Mapping) and value.get("type") == AREA_TYPE


def walk_areas(doc: Any, path: str = "") -> Iterator[Tuple[MutableMapping[str, Any], str]]:
    """Yield `(area, dot_path)` for every area in `doc`, outer areas first."""
    if isinstance(doc, Mapping):
        if is_area(doc) and path:
            yield doc, path
        for key, value in doc.items():
            # Underscore properties hold loaded joins, not content of this doc
            if isinstance(key, str) and key.startswith("_"):
                continue
            if isinstance(value, (Mapping, list)):
                yield from walk_areas(value, f"{path}.{key}" if path else str(key))
    elif isinstance(doc, list):
        for index, value in enumerate(doc):
            if isinstance(value, (Mapping, list)):
                yield from walk_areas(value, f"{path}.{index}" if path else str(index))


def collect_widgets(doc: Any) -> List[MutableMapping[str, Any]]:
    """Every widget of every area in `doc`, as one flat list."""
    widgets: List[MutableMapping[str, Any]] = []
    for area, _ in walk_areas(doc):
        widgets.extend(item for item in area.get("items") or [] if isinstance(item, Mapping))
    return widgets
