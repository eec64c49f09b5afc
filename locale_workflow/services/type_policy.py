"""
Which doc types participate in workflow.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import FrozenSet, Iterable, Optional

# Localizing users and groups raises security questions; give them a public
# doc type and join to it instead.
BASE_EXCLUDE_TYPES = ("user", "group")


@dataclass(frozen=True)
class TypePolicy:
    include_types: Optional[FrozenSet[str]] = None
    exclude_types: FrozenSet[str] = frozenset(BASE_EXCLUDE_TYPES)

    @classmethod
    def build(
        cls,
        include_types: Optional[Iterable[str]] = None,
        exclude_types: Optional[Iterable[str]] = None,
    ) -> "TypePolicy":
        return cls(
            include_types=frozenset(include_types) if include_types is not None else None,
            exclude_types=frozenset(BASE_EXCLUDE_TYPES).union(exclude_types or ()),
        )

    def includes(self, doc_type: Optional[str]) -> bool:
        if not doc_type:
            return False
        if self.include_types is not None and doc_type not in self.include_types:
            return False
        return doc_type not in self.exclude_types
