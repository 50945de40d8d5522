"""Tier A: Perplexity chat completions with web citations."""

from __future__ import annotations

from typing import Optional

import httpx

from core import SearchProvider
from utils.exceptions import ProviderError
from .base import BaseSearchProvider
from .payloads import PerplexityPayload


PERPLEXITY_URL = "https://api.perplexity.ai/chat/completions"
SYSTEM_PROMPT = "You are a research assistant. Provide comprehensive, factual information with sources."


class PerplexitySearchProvider(BaseSearchProvider):
    """Primary research tier."""

    def __init__(
        self,
        api_key: Optional[str],
        *,
        model: str = "sonar-pro",
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        super().__init__(timeout=timeout, transport=transport)
        self.api_key = api_key
        self.model = model

    @property
    def provider(self) -> SearchProvider:
        return SearchProvider.PERPLEXITY

    def is_configured(self) -> bool:
        return bool(self.api_key)

    async def _fetch(self, query: str, max_results: int) -> PerplexityPayload:
        body = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": query},
            ],
            "return_citations": True,
            "return_images": False,
            "search_recency_filter": "year",
        }
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }
        try:
            async with self._client() as client:
                response = await client.post(PERPLEXITY_URL, json=body, headers=headers)
        except httpx.HTTPError as exc:
            raise ProviderError(f"Perplexity transport error: {exc}", provider=self.provider.value) from exc

        self._raise_for_status(response)
        return PerplexityPayload.from_api(self._json(response))
