from __future__ import annotations

import asyncio
from typing import Optional

import aiohttp

from .errors import FetchError


class Fetcher:
    """Fetches pages as text with a browser user agent. No retries."""

    def __init__(self, user_agent: str, timeout_seconds: float = 30.0, limit: int = 10) -> None:
        self.user_agent = user_agent
        self.timeout_seconds = timeout_seconds
        self.limit = limit
        self._session: Optional[aiohttp.ClientSession] = None

    async def __aenter__(self) -> Fetcher:
        timeout = aiohttp.ClientTimeout(total=self.timeout_seconds or None)
        conn = aiohttp.TCPConnector(limit=self.limit)
        self._session = aiohttp.ClientSession(
            timeout=timeout,
            connector=conn,
            headers={"User-Agent": self.user_agent},
        )
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if self._session and not self._session.closed:
            await self._session.close()

    async def fetch_text(self, url: str) -> str:
        if self._session is None:
            raise RuntimeError("Fetcher used outside 'async with'")
        try:
            async with self._session.get(url) as resp:
                status = resp.status
                if 200 <= status < 300:
                    return await resp.text()
                await resp.read()
        except UnicodeDecodeError as exc:
            raise FetchError(url, "cannot decode body as text") from exc
        except asyncio.TimeoutError as exc:
            raise FetchError(url, "timed out") from exc
        except aiohttp.ClientError as exc:
            raise FetchError(url, str(exc) or type(exc).__name__) from exc
        raise FetchError(url, f"HTTP {status}", status=status)
