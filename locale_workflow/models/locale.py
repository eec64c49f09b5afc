"""
Locale models.

A locale tree is supplied by configuration; composition flattens it and
pairs every live locale with a private `<name>-draft` locale.
"""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

DRAFT_SUFFIX = "-draft"


class Locale(BaseModel):
    name: str = Field(..., min_length=1, description="Unique locale name")
    label: Optional[str] = Field(default=None, description="Human readable label")
    children: Optional[List["Locale"]] = Field(default=None, description="Sub-locales, configuration order")
    private: bool = Field(default=False, description="Private locales are never served publicly")

    model_config = ConfigDict(frozen=True, extra="allow")

    @property
    def is_draft(self) -> bool:
        return self.name.endswith(DRAFT_SUFFIX)

    def to_draft(self) -> "Locale":
        """Private twin of this locale: same label, no sub-tree."""
        return self.model_copy(
            update={"name": self.name + DRAFT_SUFFIX, "private": True, "children": None},
            deep=True,
        )


Locale.model_rebuild()
