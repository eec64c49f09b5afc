"""
Locale and correlation identity for docs saved for the first time.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, MutableMapping, Optional

from locale_workflow.services.locale_topology import LocaleTopology, draftify, is_draft
from locale_workflow.utils.id_generator import generate_id

logger = logging.getLogger(__name__)

WORKFLOW_LOCALE = "workflowLocale"
WORKFLOW_GUID = "workflowGuid"
WORKFLOW_NEW = "_workflowNew"
WORKFLOW_LOCALE_FOR_PATH_INDEX = "workflowLocaleForPathIndex"


def ensure_workflow_locale_for_path_index(doc: MutableMapping[str, Any]) -> None:
    """
    Mirror `workflowLocale` into `workflowLocaleForPathIndex` on pages only.

    Pieces never get the property, which lets a sparse unique index enforce
    one page per (locale, path). The property has no other use.
    """
    slug = doc.get("slug")
    if isinstance(slug, str) and slug.startswith("/"):
        doc[WORKFLOW_LOCALE_FOR_PATH_INDEX] = doc.get(WORKFLOW_LOCALE)
    else:
        doc.pop(WORKFLOW_LOCALE_FOR_PATH_INDEX, None)


class IdentityAssigner:
    def __init__(
        self,
        topology: LocaleTopology,
        include_type: Callable[[Optional[str]], bool],
        id_factory: Callable[[], str] = generate_id,
    ):
        self.topology = topology
        self.include_type = include_type
        self.id_factory = id_factory

    def ensure_locale(self, doc: MutableMapping[str, Any], requested_locale: Optional[str] = None) -> None:
        """
        Give a doc a `workflowLocale` and a fresh `workflowGuid` if it has none.

        New docs always start life in the draft of the requested (or default)
        locale, so code looking for drafts by id finds them before anything
        is published. Docs of types outside workflow, and docs that already
        carry a locale, are left alone.
        """
        if not self.include_type(doc.get("type")):
            return
        if doc.get(WORKFLOW_LOCALE):
            return

        locale = requested_locale or self.topology.default_locale
        if not is_draft(locale):
            locale = draftify(locale)
        doc[WORKFLOW_LOCALE] = locale
        doc[WORKFLOW_GUID] = self.id_factory()
        doc[WORKFLOW_NEW] = True
        ensure_workflow_locale_for_path_index(doc)
        logger.debug(f"Assigned locale {locale} and guid {doc[WORKFLOW_GUID]} to new {doc.get('type')} doc")
