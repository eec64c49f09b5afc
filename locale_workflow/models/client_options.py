"""
Read-only per-request snapshot handed to admin/UI collaborators.
"""

from __future__ import annotations

from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from .locale import Locale


class WorkflowClientOptions(BaseModel):
    locales: Dict[str, Locale] = Field(default_factory=dict)
    nested_locales: List[Locale] = Field(default_factory=list, alias="nestedLocales")
    locale: Optional[str] = None
    prefixes: Optional[Dict[str, str]] = None
    hostnames: Optional[Dict[str, str]] = None
    context_guid: Optional[str] = Field(default=None, alias="contextGuid")
    localized: bool = False

    model_config = ConfigDict(frozen=True, populate_by_name=True)
