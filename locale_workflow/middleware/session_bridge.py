from __future__ import annotations

import logging
from typing import Optional

from fastapi import FastAPI, Request
from starlette.responses import RedirectResponse

from locale_workflow.services.session_bridge import TOKEN_PARAM, CrossDomainSessionBridge

logger = logging.getLogger(__name__)


def install_session_bridge_middleware(app: FastAPI, bridge: Optional[CrossDomainSessionBridge] = None) -> None:
    """
    Redeem cross-domain session tokens on any incoming request.

    Requests carrying `workflowCrossDomainSessionToken` are answered with a
    redirect to the same URL minus the token, after the session (the
    `session` scope entry installed by a session middleware) has been
    replaced by the cached one. Without an explicit bridge the one on
    `app.state.session_bridge` is used.
    """

    @app.middleware("http")
    async def _session_bridge_middleware(request: Request, call_next):
        token = request.query_params.get(TOKEN_PARAM)
        if token is None:
            return await call_next(request)

        session = request.scope.get("session")
        if session is None:
            session = {}
            request.scope["session"] = session

        active_bridge = bridge or request.app.state.session_bridge
        result = await active_bridge.accept(str(request.url), token, session)
        if not result.accepted:
            logger.info(f"Cross domain session token rejected: {result.error}")
        return RedirectResponse(result.redirect_url, status_code=302)
