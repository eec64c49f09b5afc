"""
Join descriptors produced by schema scanning.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Mapping, MutableMapping


@dataclass(frozen=True)
class JoinDescriptor:
    """A forward join held by a doc or by one of its widgets.

    `doc` is the owning doc or widget (the live object, not a copy), `field`
    the schema field definition and `value` whatever the join currently holds.
    """

    doc: MutableMapping[str, Any]
    field: Mapping[str, Any]
    value: Any = None

    @property
    def field_name(self) -> str:
        return self.field.get("name")

    @property
    def target_type(self) -> str:
        return self.field.get("withType")

    def to_dict(self) -> Dict[str, Any]:
        return {"doc": self.doc, "field": self.field, "value": self.value}
