"""
Locale topology composition.

Built exactly once at startup from the configured locale tree and shared
read-only afterwards, so concurrent readers need no locking.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple, Union

from locale_workflow.models.locale import DRAFT_SUFFIX, Locale

logger = logging.getLogger(__name__)

DEFAULT_LOCALE_NAME = "default"
DEFAULT_LOCALE_TREE = ({"name": DEFAULT_LOCALE_NAME, "label": "Workflow"},)

LocaleInput = Union[Locale, Mapping[str, Any]]


def liveify(name: Optional[str]) -> Optional[str]:
    """`en-draft` -> `en`. Other names are returned as-is."""
    if name and name.endswith(DRAFT_SUFFIX):
        return name[: -len(DRAFT_SUFFIX)]
    return name


def draftify(name: str) -> str:
    """`en` -> `en-draft`. Draft names are returned as-is."""
    if name.endswith(DRAFT_SUFFIX):
        return name
    return name + DRAFT_SUFFIX


def is_draft(name: Optional[str]) -> bool:
    return bool(name) and name.endswith(DRAFT_SUFFIX)


@dataclass(frozen=True)
class LocaleTopology:
    """Immutable snapshot of the composed locales.

    `locales` holds every live locale immediately followed by its draft twin.
    `nested_locales` is the tree as configured, kept for presentation.
    """

    locales: Mapping[str, Locale]
    nested_locales: Tuple[Locale, ...]
    default_locale: str = DEFAULT_LOCALE_NAME
    localized: bool = False

    def __contains__(self, name: object) -> bool:
        return name in self.locales

    def get(self, name: Optional[str]) -> Optional[Locale]:
        if not name:
            return None
        return self.locales.get(name)

    def live_locales(self) -> List[str]:
        return [name for name in self.locales if not is_draft(name)]

    def draft_locales(self) -> List[str]:
        return [name for name in self.locales if is_draft(name)]

    @property
    def default_draft_locale(self) -> str:
        return draftify(self.default_locale)


def _coerce(locale: LocaleInput) -> Locale:
    if isinstance(locale, Locale):
        return locale
    return Locale.model_validate(dict(locale))


def _flatten(locales: Iterable[Locale]) -> List[Tuple[str, Locale]]:
    flat: List[Tuple[str, Locale]] = []
    for locale in locales:
        flat.append((locale.name, locale))
        if locale.children:
            flat.extend(_flatten(locale.children))
    return flat


def compose_locales(
    locales: Optional[Sequence[LocaleInput]] = None,
    default_locale: Optional[str] = None,
) -> LocaleTopology:
    """Flatten the locale tree and pair every locale with its draft.

    Never raises on duplicate names: a later definition replaces the earlier
    one in the flattened map.
    """
    nested = tuple(_coerce(locale) for locale in (locales or DEFAULT_LOCALE_TREE))

    flat: Dict[str, Locale] = {}
    for name, locale in _flatten(nested):
        if name in flat:
            logger.warning(f"Locale '{name}' is configured more than once; the later definition wins")
        flat[name] = locale

    localized = len(flat) > 1

    # Iterate a snapshot so drafts are never drafted again
    merged: Dict[str, Locale] = {}
    for name, locale in list(flat.items()):
        merged[name] = locale
        draft = locale.to_draft()
        merged[draft.name] = draft

    topology = LocaleTopology(
        locales=MappingProxyType(merged),
        nested_locales=nested,
        default_locale=default_locale or DEFAULT_LOCALE_NAME,
        localized=localized,
    )
    logger.info(
        f"Composed {len(flat)} locale(s) with drafts "
        f"(default={topology.default_locale}, localized={localized})"
    )
    return topology
