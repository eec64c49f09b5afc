"""
Domain exceptions

Each domain defines concrete exceptions so callers can handle errors precisely.
"""

from .base import DomainException

from .locale import (
    InvalidPrefixError,
    LocaleConfigurationError,
    NonSlugLocaleError,
    UnknownLocaleError,
)

from .ledger import (
    LedgerException,
    LedgerIndexError,
)


__all__ = [
    # Base
    "DomainException",

    # Locale
    "LocaleConfigurationError",
    "NonSlugLocaleError",
    "UnknownLocaleError",
    "InvalidPrefixError",

    # Ledger
    "LedgerException",
    "LedgerIndexError",
]
