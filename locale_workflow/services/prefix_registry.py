"""
Per-locale URL prefixes.

Either derived from the locale names (`prefixes=True`) or validated from an
explicit locale -> prefix mapping. Misconfiguration aborts startup.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, Mapping, Optional, Union

from locale_workflow.exceptions.locale import (
    InvalidPrefixError,
    NonSlugLocaleError,
    UnknownLocaleError,
)
from locale_workflow.services.locale_topology import LocaleTopology, liveify
from locale_workflow.utils.path_utils import slugify

logger = logging.getLogger(__name__)

PREFIX_PATTERN = re.compile(r"^/[^/]+$")

PrefixOption = Union[None, bool, Mapping[str, Optional[str]]]


@dataclass(frozen=True)
class PrefixRegistry:
    prefixes: Mapping[str, str]

    def __bool__(self) -> bool:
        return bool(self.prefixes)

    def __contains__(self, locale: object) -> bool:
        return locale in self.prefixes

    def prefix_for(self, locale: Optional[str]) -> Optional[str]:
        """Prefix for a live or draft locale; both share the live locale's prefix."""
        if not locale:
            return None
        return self.prefixes.get(liveify(locale))

    def as_dict(self) -> Dict[str, str]:
        return dict(self.prefixes)


def normalize_prefix(prefix: Optional[object]) -> str:
    value = "" if prefix is None else str(prefix)
    if value and not value.startswith("/"):
        value = "/" + value
    return value


def _derive_prefixes(topology: LocaleTopology) -> Dict[str, str]:
    prefixes: Dict[str, str] = {}
    for name in topology.locales:
        if name != slugify(name):
            raise NonSlugLocaleError(name)
        live = liveify(name)
        prefixes[live] = "/" + live
    return prefixes


def _validate_prefixes(topology: LocaleTopology, configured: Mapping[str, Optional[str]]) -> Dict[str, str]:
    prefixes: Dict[str, str] = {}
    for locale, raw_prefix in configured.items():
        if locale not in topology:
            raise UnknownLocaleError(locale)
        prefix = normalize_prefix(raw_prefix)
        if not PREFIX_PATTERN.match(prefix):
            raise InvalidPrefixError(locale, prefix)
        prefixes[locale] = prefix
    return prefixes


def build_prefix_registry(topology: LocaleTopology, option: PrefixOption = None) -> PrefixRegistry:
    """
    Build the prefix registry from the `prefixes` option.

    Args:
        topology: Composed locale topology
        option: True to derive prefixes from locale names, a mapping of
            locale -> prefix, or None/False for no prefixing

    Raises:
        NonSlugLocaleError: derived mode with a locale name that is not a slug
        UnknownLocaleError: mapping names a locale missing from the topology
        InvalidPrefixError: mapping value is not `/` plus one segment
    """
    if option is True:
        prefixes = _derive_prefixes(topology)
    elif option:
        prefixes = _validate_prefixes(topology, option)
    else:
        prefixes = {}

    if prefixes:
        logger.info(f"Locale prefixes: {prefixes}")
    return PrefixRegistry(prefixes=MappingProxyType(prefixes))
