"""
Page slug prefixes.

The editing UI normally creates page slugs with the right locale prefix
already; this is the failsafe applied before every page save.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Mapping, MutableMapping

from locale_workflow.services.identity_assigner import (
    WORKFLOW_LOCALE,
    ensure_workflow_locale_for_path_index,
)
from locale_workflow.services.prefix_registry import PrefixRegistry
from locale_workflow.utils.path_utils import first_path_segment, slugify

logger = logging.getLogger(__name__)


class SlugPrefixer:
    def __init__(self, prefixes: PrefixRegistry, is_page: Callable[[Mapping[str, Any]], bool]):
        self.prefixes = prefixes
        self.is_page = is_page

    def apply_prefix(self, doc: MutableMapping[str, Any]) -> None:
        """
        Make sure a page's slug starts with its locale's prefix.

        Nothing happens unless the doc is a page with a locale that has a
        prefix. A slug whose first segment is some other value gets the
        prefix prepended as-is (`/fr/about` becomes `/en/fr/about` for an
        `en` page); that segment is never stripped.
        """
        locale = doc.get(WORKFLOW_LOCALE)
        prefix = self.prefixes.prefix_for(locale)
        if not (prefix and locale and self.is_page(doc)):
            return

        slug = doc.get("slug")
        existing = first_path_segment(slug)
        if existing is None:
            # No slug at all, or no first component
            doc["slug"] = prefix + (slug or "/" + slugify(doc.get("title")))
        elif "/" + existing == prefix:
            return
        else:
            doc["slug"] = prefix + slug

        logger.debug(f"Prefixed slug of {doc.get('type')} doc in {locale}: {doc['slug']}")
        ensure_workflow_locale_for_path_index(doc)
