"""
Workflow facade.

Composes the locale topology, prefix registry and type policy once at
startup and wires them into the per-doc components. Everything built here
is immutable, so a single Workflow instance can serve concurrent requests.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, MutableMapping, Optional, Sequence

from locale_workflow.models.client_options import WorkflowClientOptions
from locale_workflow.models.joins import JoinDescriptor
from locale_workflow.services.doc_types import DocTypeRegistry
from locale_workflow.services.identity_assigner import (
    WORKFLOW_GUID,
    IdentityAssigner,
    ensure_workflow_locale_for_path_index,
)
from locale_workflow.services.join_scanner import SchemaJoinScanner
from locale_workflow.services.locale_topology import LocaleTopology, compose_locales
from locale_workflow.services.prefix_registry import (
    PrefixOption,
    PrefixRegistry,
    build_prefix_registry,
)
from locale_workflow.services.slug_prefixer import SlugPrefixer
from locale_workflow.services.type_policy import TypePolicy

logger = logging.getLogger(__name__)

BASE_EXCLUDE_PROPERTIES = (
    "_id",
    "path",
    "rank",
    "level",
    "createdAt",
    "updatedAt",
    "lowSearchText",
    "highSearchText",
    "highSearchWords",
    "searchSummary",
    # Permissions are propagated to every locale on save, not through workflow
    "docPermissions",
    "loginRequired",
    "viewUsersIds",
    "viewGroupsIds",
    "editUsersIds",
    "editGroupsIds",
    "viewUsersRelationships",
    "viewGroupsRelationships",
    "editUsersRelationships",
    "editGroupsRelationships",
    "applyLoginRequiredToSubpages",
    "viewUsersRemovedIds",
    "viewGroupsRemovedIds",
    "editUsersRemovedIds",
    "editGroupsRemovedIds",
    "advisoryLock",
)

CONTEXT_PROJECTION = {
    "title": 1,
    "slug": 1,
    "path": 1,
    "workflowLocale": 1,
    "tags": 1,
    "type": 1,
}


class Workflow:
    def __init__(
        self,
        topology: LocaleTopology,
        prefixes: PrefixRegistry,
        type_policy: TypePolicy,
        doc_types: DocTypeRegistry,
        hostnames: Optional[Mapping[str, str]] = None,
        exclude_properties: Sequence[str] = (),
    ):
        self.topology = topology
        self.prefixes = prefixes
        self.type_policy = type_policy
        self.doc_types = doc_types
        self.hostnames: Dict[str, str] = dict(hostnames or {})
        self.exclude_properties: List[str] = list(BASE_EXCLUDE_PROPERTIES) + list(exclude_properties)

        self.identity = IdentityAssigner(topology, type_policy.includes)
        self.slug_prefixer = SlugPrefixer(prefixes, doc_types.is_page)
        self.join_scanner = SchemaJoinScanner(doc_types, type_policy.includes)

    @classmethod
    def compose(
        cls,
        doc_types: DocTypeRegistry,
        *,
        locales: Optional[Sequence[Any]] = None,
        default_locale: Optional[str] = None,
        prefixes: PrefixOption = None,
        hostnames: Optional[Mapping[str, str]] = None,
        include_types: Optional[Sequence[str]] = None,
        exclude_types: Optional[Sequence[str]] = None,
        exclude_properties: Sequence[str] = (),
    ) -> "Workflow":
        """Compose everything once. Raises LocaleConfigurationError on bad prefixes."""
        topology = compose_locales(locales, default_locale)
        return cls(
            topology=topology,
            prefixes=build_prefix_registry(topology, prefixes),
            type_policy=TypePolicy.build(include_types, exclude_types),
            doc_types=doc_types,
            hostnames=hostnames,
            exclude_properties=exclude_properties,
        )

    @classmethod
    def from_settings(cls, settings: Any, doc_types: DocTypeRegistry) -> "Workflow":
        options = settings.workflow
        for page_type in options.page_types:
            doc_types.add_page_type(page_type)
        return cls.compose(
            doc_types,
            locales=options.locales,
            default_locale=options.default_locale,
            prefixes=options.prefixes,
            hostnames=options.hostnames,
            include_types=options.include_types,
            exclude_types=options.exclude_types,
            exclude_properties=options.exclude_properties,
        )

    @property
    def localized(self) -> bool:
        return self.topology.localized

    def include_type(self, doc_type: Optional[str]) -> bool:
        return self.type_policy.includes(doc_type)

    # Per-doc operations

    def ensure_locale(self, doc: MutableMapping[str, Any], locale: Optional[str] = None) -> None:
        self.identity.ensure_locale(doc, locale)

    def ensure_page_slug_prefix(self, doc: MutableMapping[str, Any]) -> None:
        self.slug_prefixer.apply_prefix(doc)

    def before_save(self, doc: MutableMapping[str, Any], locale: Optional[str] = None) -> None:
        """Run before every insert or update of a doc."""
        self.ensure_locale(doc, locale)
        if self.include_type(doc.get("type")):
            self.ensure_page_slug_prefix(doc)
            ensure_workflow_locale_for_path_index(doc)

    def find_joins(self, doc: MutableMapping[str, Any]) -> List[JoinDescriptor]:
        return self.join_scanner.find_joins(doc)

    # Request level

    def guess_locale(self) -> str:
        """Locale used when neither session, hostname nor prefix names one."""
        return self.topology.default_locale

    def resolve_locale(self, hint: Optional[str]) -> str:
        if hint and hint in self.topology:
            return hint
        if hint:
            logger.debug(f"Ignoring unknown locale hint {hint!r}")
        return self.guess_locale()

    def locale_for_hostname(self, hostname: Optional[str]) -> Optional[str]:
        if not hostname:
            return None
        hostname = hostname.split(":", 1)[0].lower()
        for locale, configured in self.hostnames.items():
            if configured.lower() == hostname:
                return locale
        return None

    def locale_for_path(self, path: Optional[str]) -> Optional[str]:
        """Live locale whose prefix starts `path`, if any."""
        if not path:
            return None
        for locale, prefix in self.prefixes.prefixes.items():
            if path == prefix or path.startswith(prefix + "/"):
                return locale
        return None

    def get_context_projection(self) -> Dict[str, int]:
        return dict(CONTEXT_PROJECTION)

    def get_client_options(
        self,
        locale: Optional[str],
        context: Optional[Mapping[str, Any]] = None,
    ) -> WorkflowClientOptions:
        """Read-only snapshot for the admin UI of one request."""
        return WorkflowClientOptions(
            locales=dict(self.topology.locales),
            nested_locales=list(self.topology.nested_locales),
            locale=locale,
            prefixes=self.prefixes.as_dict() or None,
            hostnames=dict(self.hostnames) or None,
            context_guid=context.get(WORKFLOW_GUID) if context else None,
            localized=self.topology.localized,
        )
