"""
Cross-domain session bridge.

Locales served from their own hostnames cannot share a cookie, so a
session is handed over through a one-shot token: the sending host stores
the session in a shared cache under a fresh token and redirects with
`?workflowCrossDomainSessionToken=...`; the receiving host redeems it.
"""

from __future__ import annotations

import asyncio
import json
import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Any, Dict, MutableMapping, Optional, Tuple
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

from redis.exceptions import RedisError

from locale_workflow.services.session_cache import SessionCache
from locale_workflow.utils.id_generator import generate_id

logger = logging.getLogger(__name__)

TOKEN_PARAM = "workflowCrossDomainSessionToken"
EXPIRED_TOKEN_MESSAGE = "expired or nonexistent cross domain session token"


@dataclass(frozen=True)
class SessionBridgeResult:
    accepted: bool
    redirect_url: str
    error: Optional[str] = None


def set_query_param(url: str, name: str, value: Optional[str]) -> str:
    """Return `url` with query parameter `name` set, or removed when value is None."""
    parts = urlsplit(url)
    query = [(key, val) for key, val in parse_qsl(parts.query, keep_blank_values=True) if key != name]
    if value is not None:
        query.append((name, value))
    return urlunsplit((parts.scheme, parts.netloc, parts.path, urlencode(query), parts.fragment))


class CrossDomainSessionBridge:
    def __init__(self, cache: SessionCache, ttl: Optional[int] = None):
        self.cache = cache
        self.ttl = ttl
        # token -> (lock, holders); entries live only while a redemption is in flight
        self._token_locks: Dict[str, Tuple[asyncio.Lock, int]] = {}

    @asynccontextmanager
    async def _token_lock(self, token: str):
        lock, holders = self._token_locks.get(token, (None, 0))
        if lock is None:
            lock = asyncio.Lock()
        self._token_locks[token] = (lock, holders + 1)
        try:
            async with lock:
                yield
        finally:
            lock, holders = self._token_locks[token]
            if holders <= 1:
                del self._token_locks[token]
            else:
                self._token_locks[token] = (lock, holders - 1)

    async def issue(self, session: MutableMapping[str, Any]) -> str:
        """Store a copy of `session` under a fresh one-shot token."""
        token = generate_id()
        await self.cache.set(token, dict(session), ttl=self.ttl)
        return token

    def transfer_url(self, url: str, token: str) -> str:
        return set_query_param(url, TOKEN_PARAM, token)

    async def accept(
        self,
        url: str,
        token: Optional[str],
        session: MutableMapping[str, Any],
    ) -> SessionBridgeResult:
        """
        Redeem a token: replace the session with the cached one, then drop the token.

        The redirect URL is always `url` without the token parameter. An
        unknown or expired token leaves the session untouched. Failing to
        delete a redeemed token is logged but does not block the user.
        """
        redirect_url = set_query_param(url, TOKEN_PARAM, None)

        if not token:
            logger.warning(EXPIRED_TOKEN_MESSAGE)
            return SessionBridgeResult(accepted=False, redirect_url=redirect_url, error=EXPIRED_TOKEN_MESSAGE)

        # get and clear must not interleave with another redeemer of the same token
        async with self._token_lock(token):
            try:
                session_data = await self.cache.get(token)
            except RedisError as e:
                logger.error(f"Cross domain session lookup failed: {e}")
                return SessionBridgeResult(accepted=False, redirect_url=redirect_url, error=str(e))

            if session_data is None:
                logger.warning(EXPIRED_TOKEN_MESSAGE)
                return SessionBridgeResult(
                    accepted=False, redirect_url=redirect_url, error=EXPIRED_TOKEN_MESSAGE
                )

            try:
                await self.cache.set(token, None)
            except RedisError as e:
                logger.error(f"Could not clear cross domain session token: {e}")

        if isinstance(session_data, str):
            session_data = json.loads(session_data)

        session.clear()
        session.update(session_data)
        return SessionBridgeResult(accepted=True, redirect_url=redirect_url)
