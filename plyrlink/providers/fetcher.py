"""
HTTP fetcher for the extraction pipeline. Wraps aiohttp with a fixed
browser identity and timeout, and maps every transport failure to
NetworkError.
"""
from __future__ import annotations
import aiohttp
import asyncio
from typing import Optional

from .base import DEFAULT_UA, NetworkError


class Fetcher:
    def __init__(self, *, timeout: float = 5.0, user_agent: str = DEFAULT_UA):
        self.timeout = aiohttp.ClientTimeout(total=timeout)
        self.user_agent = user_agent
        self._session: Optional[aiohttp.ClientSession] = None

    async def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                timeout=self.timeout,
                headers={"User-Agent": self.user_agent},
                cookie_jar=aiohttp.DummyCookieJar(),
                raise_for_status=True,
            )
        return self._session

    async def close(self):
        if self._session and not self._session.closed:
            await self._session.close()

    async def __aenter__(self) -> "Fetcher":
        return self

    async def __aexit__(self, *exc):
        await self.close()

    async def get(self, url: str, *, headers: dict | None = None) -> str:
        session = await self._get_session()
        try:
            async with session.get(url, headers=headers or {}) as resp:
                # Undecodable bytes are replaced, the page still parses
                return await resp.text(errors="replace")
        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
            # ValueError: URLs yarl cannot parse (raised bare by older aiohttp)
            raise NetworkError(url, e) from e
