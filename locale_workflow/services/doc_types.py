"""
Doc and widget type registry.

The host document store owns the real schemas; this registry is the
read-only view workflow needs: a schema per doc type, a schema per widget
type, and which doc types are pages.

Schemas are opaque lists of field definitions (mappings), for example::

    [
        {"name": "author", "type": "joinByOne", "withType": "person"},
        {"name": "links", "type": "array", "schema": [...]},
    ]
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, Mapping, Optional, Sequence

logger = logging.getLogger(__name__)

Schema = Sequence[Mapping[str, Any]]


@dataclass(frozen=True)
class TypeManager:
    name: str
    schema: Schema = ()
    is_page: bool = False


class DocTypeRegistry:
    def __init__(
        self,
        doc_types: Optional[Iterable[TypeManager]] = None,
        widget_types: Optional[Iterable[TypeManager]] = None,
        page_types: Optional[Iterable[str]] = None,
    ):
        self._doc_managers: Dict[str, TypeManager] = {}
        self._widget_managers: Dict[str, TypeManager] = {}
        self._page_types = set(page_types or ())
        for manager in doc_types or ():
            self.add_doc_type(manager)
        for manager in widget_types or ():
            self.add_widget_type(manager)

    def add_doc_type(self, manager: TypeManager) -> None:
        self._doc_managers[manager.name] = manager
        if manager.is_page:
            self._page_types.add(manager.name)

    def add_widget_type(self, manager: TypeManager) -> None:
        self._widget_managers[manager.name] = manager

    def add_page_type(self, doc_type: str) -> None:
        self._page_types.add(doc_type)

    def get_manager(self, doc_type: Optional[str]) -> Optional[TypeManager]:
        if not doc_type:
            return None
        return self._doc_managers.get(doc_type)

    def get_widget_manager(self, widget_type: Optional[str]) -> Optional[TypeManager]:
        if not widget_type:
            return None
        return self._widget_managers.get(widget_type)

    def is_page(self, doc: Mapping[str, Any]) -> bool:
        """Pages are URL addressable: a page type, or any doc whose slug starts with /."""
        if doc.get("type") in self._page_types:
            return True
        slug = doc.get("slug")
        return isinstance(slug, str) and slug.startswith("/")
