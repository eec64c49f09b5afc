"""
Workflow indexes on the host document store.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Mapping, Protocol, Tuple

logger = logging.getLogger(__name__)


class IndexCreator(Protocol):
    async def ensure_index(self, keys: Mapping[str, int], options: Dict[str, Any]) -> Any:
        ...


DOC_INDEXES: Tuple[Tuple[Dict[str, int], Dict[str, Any]], ...] = (
    ({"workflowGuid": 1}, {}),
    # One page per (locale, path); pieces lack the property so the index is sparse
    ({"workflowLocaleForPathIndex": 1, "path": 1}, {"unique": True, "sparse": True}),
)


async def ensure_doc_indexes(store: IndexCreator) -> None:
    """Create the doc indexes in order; an error propagates and stops the rest."""
    for keys, options in DOC_INDEXES:
        await store.ensure_index(keys, options)
        logger.debug(f"Ensured doc index {keys}")
