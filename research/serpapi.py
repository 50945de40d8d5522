"""Tier B: SerpAPI Google organic results, with enforced call spacing."""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Awaitable, Callable, Optional

import httpx

from core import SearchProvider
from utils.exceptions import ProviderError
from .base import BaseSearchProvider
from .payloads import SerpApiPayload


logger = logging.getLogger(__name__)

SERPAPI_URL = "https://serpapi.com/search"


class SerpApiSearchProvider(BaseSearchProvider):
    """
    Fallback research tier

    SerpAPI requires a minimum gap between consecutive calls from the same
    client; the gap is enforced with an explicit delay before each call.
    """

    def __init__(
        self,
        api_key: Optional[str],
        *,
        min_interval_sec: float = 1.0,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        super().__init__(timeout=timeout, transport=transport)
        self.api_key = api_key
        self.min_interval_sec = max(0.0, float(min_interval_sec))
        self._clock = clock
        self._sleep = sleep
        self._last_call_at: Optional[float] = None
        self._lock = asyncio.Lock()

    @property
    def provider(self) -> SearchProvider:
        return SearchProvider.SERPAPI

    def is_configured(self) -> bool:
        return bool(self.api_key)

    async def _wait_for_spacing(self) -> None:
        """Delay until min_interval_sec has passed since the previous call."""
        async with self._lock:
            if self._last_call_at is not None:
                elapsed = self._clock() - self._last_call_at
                if elapsed < self.min_interval_sec:
                    delay = self.min_interval_sec - elapsed
                    logger.debug(f"[serpapi] spacing calls, sleeping {delay:.3f}s")
                    await self._sleep(delay)
            self._last_call_at = self._clock()

    async def _fetch(self, query: str, max_results: int) -> SerpApiPayload:
        await self._wait_for_spacing()
        params = {
            "q": query,
            "api_key": self.api_key,
            "num": max_results,
            "engine": "google",
        }
        try:
            async with self._client() as client:
                response = await client.get(SERPAPI_URL, params=params)
        except httpx.HTTPError as exc:
            raise ProviderError(f"SerpAPI transport error: {exc}", provider=self.provider.value) from exc

        self._raise_for_status(response)
        data = self._json(response)
        if data.get("error"):
            raise ProviderError(f"SerpAPI error: {data['error']}", provider=self.provider.value)
        return SerpApiPayload.from_api(data)
