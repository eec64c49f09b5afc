"""
Commit ledger models.

Commit records are append-only: the ledger exposes no update or delete.
Field aliases are the persisted names shared with other workflow clients.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field


class CommitRecord(BaseModel):
    commit_id: Optional[str] = Field(default=None, alias="_id", description="Commit id; a uuid is generated when absent")
    created_at: Optional[datetime] = Field(default=None, alias="createdAt", description="UTC timestamp")
    from_id: str = Field(..., alias="fromId", description="Source doc id (draft side)")
    to_id: str = Field(..., alias="toId", description="Destination doc id")
    workflow_guid: str = Field(..., alias="workflowGuid", description="Correlation id shared by all locales")

    from_locale: Optional[str] = Field(default=None, alias="fromLocale")
    to_locale: Optional[str] = Field(default=None, alias="toLocale")
    user_id: Optional[str] = Field(default=None, alias="userId")

    # Anything else the propagation step wants to keep (diffs, snapshots...)
    payload: Dict[str, Any] = Field(default_factory=dict)

    model_config = ConfigDict(populate_by_name=True, extra="ignore")
