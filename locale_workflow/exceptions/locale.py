"""
Locale configuration exceptions

All of these are raised while composing the locale topology and prefix
registry at startup; there is no degraded mode.
"""

from .base import DomainException


class LocaleConfigurationError(DomainException):
    """Locale configuration is unusable"""

    def __init__(self, message: str, code: str = "LOCALE_CONFIGURATION_ERROR",
                 details: dict = None):
        super().__init__(message=message, code=code, details=details)


class NonSlugLocaleError(LocaleConfigurationError):
    """Automatic prefixes require every locale name to be a slug"""

    def __init__(self, locale: str):
        super().__init__(
            message=(
                f"Locale '{locale}' is not a slug. If prefixes is set to true, locale names "
                "must be slugs (hyphens not underscores, lowercase letters, no other punctuation). "
                "Otherwise map locales to prefixes explicitly."
            ),
            code="NON_SLUG_LOCALE",
            details={"locale": locale}
        )


class UnknownLocaleError(LocaleConfigurationError):
    """A prefix was configured for a locale that does not exist"""

    def __init__(self, locale: str):
        super().__init__(
            message=f"Prefix configured for locale '{locale}' which does not correspond to any configured locale",
            code="UNKNOWN_LOCALE",
            details={"locale": locale}
        )


class InvalidPrefixError(LocaleConfigurationError):
    """A configured prefix is not a single absolute path segment"""

    def __init__(self, locale: str, prefix: str):
        super().__init__(
            message=f"Prefix '{prefix}' for locale '{locale}' is invalid. It must be / followed by non-slash characters only",
            code="INVALID_PREFIX",
            details={"locale": locale, "prefix": prefix}
        )
