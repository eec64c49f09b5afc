"""
Service Factory Module

Startup composition for a host application: logging, the Workflow facade,
the commit ledger, doc-store indexes and the cross-domain session bridge,
all attached to `app.state` by a FastAPI lifespan.
"""

import logging
from contextlib import asynccontextmanager
from typing import Any, Optional

from fastapi import FastAPI

from locale_workflow.config.settings import ApplicationSettings, get_settings
from locale_workflow.middleware.session_bridge import install_session_bridge_middleware
from locale_workflow.services.commit_ledger import create_commit_ledger
from locale_workflow.services.doc_indexes import IndexCreator, ensure_doc_indexes
from locale_workflow.services.doc_types import DocTypeRegistry
from locale_workflow.services.session_bridge import CrossDomainSessionBridge
from locale_workflow.services.session_cache import SessionCache
from locale_workflow.services.workflow import Workflow
from locale_workflow.utils.app_logger import configure_logging

logger = logging.getLogger(__name__)


def create_workflow_lifespan(
    doc_types: DocTypeRegistry,
    settings: Optional[ApplicationSettings] = None,
    doc_store: Optional[IndexCreator] = None,
):
    """
    Build a lifespan that composes workflow state once per process.

    Configuration errors (bad prefixes) and ledger index failures raise here
    and abort startup.
    """

    @asynccontextmanager
    async def workflow_lifespan(app: FastAPI):
        active = settings or get_settings()
        configure_logging(active.log_level)

        workflow = Workflow.from_settings(active, doc_types)
        ledger = create_commit_ledger(active)
        await ledger.open()
        if doc_store is not None:
            await ensure_doc_indexes(doc_store)

        cache = SessionCache.from_url(
            active.cache.redis_url,
            namespace=active.cache.session_bridge_namespace,
            default_ttl=active.cache.session_bridge_ttl,
        )

        app.state.workflow = workflow
        app.state.commit_ledger = ledger
        app.state.session_bridge = CrossDomainSessionBridge(cache, ttl=active.cache.session_bridge_ttl)
        logger.info(f"Workflow started with locales {workflow.topology.live_locales()}")
        try:
            yield
        finally:
            await ledger.close()
            await cache.close()
            logger.info("Workflow stopped")

    return workflow_lifespan


def create_workflow_app(
    doc_types: DocTypeRegistry,
    settings: Optional[ApplicationSettings] = None,
    doc_store: Optional[IndexCreator] = None,
    **fastapi_kwargs: Any,
) -> FastAPI:
    """FastAPI application with workflow state and the session bridge installed."""
    app = FastAPI(lifespan=create_workflow_lifespan(doc_types, settings, doc_store), **fastapi_kwargs)
    install_session_bridge_middleware(app)
    return app
