"""
Session management for proper resource handling and connection pooling.

One shared `aiohttp.ClientSession` serves every provider call made by an
engine, so connections are pooled and the User-Agent required by the
Wikimedia APIs and Nominatim is always sent.
"""

import asyncio
from typing import Optional

import aiohttp

from travel_explorer.config import Config, get_config


class SessionManager:
    """Owns the shared HTTP session for one engine."""

    def __init__(self, config: Optional[Config] = None):
        self.config = config or get_config()
        self._session: Optional[aiohttp.ClientSession] = None
        self._lock = asyncio.Lock()

    async def get_session(self) -> aiohttp.ClientSession:
        """Get the shared HTTP session, creating it if necessary.

        Uses a lock to prevent race conditions when multiple coroutines
        try to create the session simultaneously.
        """
        async with self._lock:
            if self._session is None or self._session.closed:
                self._session = self._create_session()
            return self._session

    def _create_session(self) -> aiohttp.ClientSession:
        # individual requests pass tighter per-provider timeouts
        timeout = aiohttp.ClientTimeout(total=max(
            self.config.timeout_config.places,
            self.config.timeout_config.guide,
            self.config.timeout_config.forecast,
        ) * 2)

        connector = aiohttp.TCPConnector(
            limit=100,
            limit_per_host=20,
            ttl_dns_cache=300,
        )

        return aiohttp.ClientSession(
            timeout=timeout,
            connector=connector,
            headers={
                'User-Agent': self.config.user_agent,
                'Accept': 'application/json',
                'Accept-Language': 'en-US,en;q=0.9',
            }
        )

    async def close(self):
        """Close the shared session and clean up resources."""
        async with self._lock:
            if self._session and not self._session.closed:
                await self._session.close()
            self._session = None

    async def __aenter__(self) -> aiohttp.ClientSession:
        return await self.get_session()

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()
