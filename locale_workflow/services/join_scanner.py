"""
Forward join discovery.

Finds every join a doc holds: in its own schema, in array fields of that
schema (recursively), and in the schemas of widgets found in its areas.
Only forward joins are reported and targets are never loaded; a descriptor
says where a join can point and what it currently holds.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Callable, List, Mapping, MutableMapping, Optional

from locale_workflow.models.joins import JoinDescriptor
from locale_workflow.services.area_walker import collect_widgets
from locale_workflow.services.doc_types import DocTypeRegistry, Schema

logger = logging.getLogger(__name__)


class FieldType(str, Enum):
    """Schema field kinds the scanner dispatches on"""

    JOIN_BY_ONE = "joinByOne"
    JOIN_BY_ARRAY = "joinByArray"
    ARRAY = "array"


JOIN_FIELD_TYPES = frozenset({FieldType.JOIN_BY_ONE.value, FieldType.JOIN_BY_ARRAY.value})


class SchemaJoinScanner:
    def __init__(self, doc_types: DocTypeRegistry, include_type: Callable[[Optional[str]], bool]):
        """
        Args:
            doc_types: Registry resolving doc and widget schemas
            include_type: Predicate telling whether a join target type is
                under workflow
        """
        self.doc_types = doc_types
        self.include_type = include_type

    def find_joins(self, doc: MutableMapping[str, Any]) -> List[JoinDescriptor]:
        """Joins in the doc's own schema, then joins in its widgets."""
        return self.find_joins_in_doc_schema(doc) + self.find_joins_in_areas(doc)

    def find_joins_in_doc_schema(self, doc: MutableMapping[str, Any]) -> List[JoinDescriptor]:
        manager = self.doc_types.get_manager(doc.get("type"))
        if manager is None:
            return []
        return self.find_joins_in_schema(doc, manager.schema)

    def find_joins_in_areas(self, doc: MutableMapping[str, Any]) -> List[JoinDescriptor]:
        joins: List[JoinDescriptor] = []
        for widget in collect_widgets(doc):
            manager = self.doc_types.get_widget_manager(widget.get("type"))
            if manager is None:
                # Obsolete widget types are tolerated
                logger.debug(f"Skipping widget of unregistered type {widget.get('type')!r}")
                continue
            joins.extend(self.find_joins_in_schema(widget, manager.schema))
        return joins

    def find_joins_in_schema(self, doc: Mapping[str, Any], schema: Schema) -> List[JoinDescriptor]:
        """
        Joins described by `schema` on `doc` (a doc, widget or array item).

        Direct join fields come first, in declaration order, followed by the
        joins found inside array fields, also in declaration order.
        """
        direct = [
            JoinDescriptor(doc=doc, field=field, value=doc.get(field.get("name")))
            for field in schema or ()
            if self._is_included_join(field)
        ]
        from_arrays: List[JoinDescriptor] = []
        for field in schema or ():
            if field.get("type") != FieldType.ARRAY.value:
                continue
            for item in doc.get(field.get("name")) or []:
                if isinstance(item, Mapping):
                    from_arrays.extend(self.find_joins_in_schema(item, field.get("schema") or ()))
        return direct + from_arrays

    def _is_included_join(self, field: Mapping[str, Any]) -> bool:
        return field.get("type") in JOIN_FIELD_TYPES and self.include_type(field.get("withType"))
