"""
Unified configuration access point

    from locale_workflow.config import get_settings

    settings = get_settings()
    locales = settings.workflow.locales
"""

from .settings import (
    ApplicationSettings,
    CacheSettings,
    DatabaseSettings,
    Environment,
    WorkflowSettings,
    get_settings,
    reload_settings,
)

__all__ = [
    "ApplicationSettings",
    "CacheSettings",
    "DatabaseSettings",
    "Environment",
    "WorkflowSettings",
    "get_settings",
    "reload_settings",
]
