import asyncio
import json
import logging
from typing import Any, Dict, List, Optional
from urllib.parse import quote

import aiohttp
from pydantic import BaseModel

from core.config import settings
from features.common.exceptions.harbour_exceptions import FetchError

logger = logging.getLogger(__name__)

class ProxyEndpoint(BaseModel):
    """A CORS proxy URL prefix. Envelope proxies return {"contents": ...} JSON."""
    prefix: str
    envelope: bool = False

    def wrap(self, url: str) -> str:
        return f"{self.prefix}{quote(url, safe='')}"

class ProxyChannel:
    """Content fetch channel over an ordered list of CORS proxies.

    acquire() probes the proxies in order with a known-good test request and
    keeps the first that answers. fetch_text() then routes every request
    through that proxy until the next acquire().
    """

    def __init__(
        self,
        proxies: Optional[List[Dict[str, Any]]] = None,
        probe_url: Optional[str] = None,
        timeout: Optional[float] = None,
        max_attempts: Optional[int] = None
    ):
        self.proxies = [ProxyEndpoint(**p) for p in (proxies if proxies is not None else settings.proxies)]
        self.probe_url = probe_url or settings.proxy_probe_url
        self.timeout = aiohttp.ClientTimeout(total=timeout or settings.request["timeout"])
        self.max_attempts = max_attempts or settings.request["max_attempts"]
        self.active: Optional[ProxyEndpoint] = None
        self._session: Optional[aiohttp.ClientSession] = None

    async def _init_session(self) -> aiohttp.ClientSession:
        if not self._session:
            self._session = aiohttp.ClientSession()
        return self._session

    async def close(self):
        if self._session:
            await self._session.close()
            self._session = None

    async def acquire(self) -> Optional[ProxyEndpoint]:
        """Probe proxies in order, first success wins. None if all fail."""
        session = await self._init_session()
        self.active = None

        for attempt, proxy in enumerate(self.proxies[:self.max_attempts], start=1):
            try:
                async with session.get(proxy.wrap(self.probe_url), timeout=self.timeout) as response:
                    if response.status == 200:
                        self.active = proxy
                        logger.info(f"🔌 Using proxy {proxy.prefix} (attempt {attempt})")
                        return proxy
                    logger.debug(f"Proxy {proxy.prefix} answered {response.status}")
            except (aiohttp.ClientError, asyncio.TimeoutError) as e:
                logger.debug(f"Proxy {proxy.prefix} failed: {e!r}")

        logger.error("❌ No working proxy found")
        return None

    async def fetch_text(self, url: str) -> str:
        """Fetch a URL through the active proxy and return the body text."""
        if not self.active:
            raise FetchError("No proxy acquired")

        session = await self._init_session()
        try:
            async with session.get(self.active.wrap(url), timeout=self.timeout) as response:
                response.raise_for_status()
                text = await response.text()
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise FetchError(f"Error fetching {url}: {e!r}") from e
        except UnicodeDecodeError as e:
            raise FetchError(f"Undecodable response for {url}: {e}") from e

        if self.active.envelope:
            text = self._unwrap(text, url)

        if not text:
            raise FetchError(f"Empty response for {url}")
        return text

    @staticmethod
    def _unwrap(body: str, url: str) -> str:
        try:
            payload = json.loads(body)
        except json.JSONDecodeError as e:
            raise FetchError(f"Malformed proxy envelope for {url}") from e
        contents = payload.get("contents") if isinstance(payload, dict) else None
        if not isinstance(contents, str):
            raise FetchError(f"Proxy envelope for {url} has no contents")
        return contents
