"""
Base Search Provider
Shared template for every research tier
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional
import logging

import httpx

from core import SearchProvider, SearchResponse
from utils.exceptions import ProviderError
from .payloads import ProviderPayload


logger = logging.getLogger(__name__)


class BaseSearchProvider(ABC):
    """
    Research tier adapter

    Subclasses fetch one provider payload; search() maps it into the
    canonical SearchResponse. Every failure surfaces as ProviderError so the
    orchestrator can fall through to the next tier.
    """

    def __init__(
        self,
        *,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.timeout = timeout
        self._transport = transport

    @property
    @abstractmethod
    def provider(self) -> SearchProvider:
        """Tier identity reported in SearchResponse.provider"""
        pass

    @abstractmethod
    def is_configured(self) -> bool:
        """Whether credentials are present"""
        pass

    @abstractmethod
    async def _fetch(self, query: str, max_results: int) -> ProviderPayload:
        """Issue the provider call and parse its raw payload"""
        pass

    async def search(
        self,
        query: str,
        *,
        max_results: int = 10,
        include_content: bool = True,
    ) -> SearchResponse:
        if not self.is_configured():
            raise ProviderError(f"{self.provider.value} is not configured", provider=self.provider.value)

        payload = await self._fetch(query, max_results)
        results = payload.to_results(max_results)
        if not results:
            raise ProviderError(f"{self.provider.value} returned no results", provider=self.provider.value)

        summary = payload.summary(query, results)
        if not include_content:
            results = [item.model_copy(update={"snippet": ""}) for item in results]

        total = getattr(payload, "total_results", None) or len(results)
        self._log_search(query, len(results))
        return SearchResponse(
            success=True,
            provider=self.provider,
            query=query,
            summary=summary,
            results=results,
            total_results=int(total),
        )

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=httpx.Timeout(self.timeout),
            follow_redirects=True,
            transport=self._transport,
        )

    def _raise_for_status(self, response: httpx.Response) -> None:
        if response.is_success:
            return
        body = str(response.text or "")[:300]
        raise ProviderError(
            f"{self.provider.value} API error: {response.status_code} - {body}",
            provider=self.provider.value,
            status_code=response.status_code,
        )

    def _json(self, response: httpx.Response) -> Dict[str, Any]:
        try:
            data = response.json()
        except ValueError as exc:
            raise ProviderError(f"{self.provider.value} returned invalid JSON", provider=self.provider.value) from exc
        if not isinstance(data, dict):
            raise ProviderError(f"{self.provider.value} returned an unexpected payload", provider=self.provider.value)
        return data

    def _log_search(self, query: str, count: int) -> None:
        logger.info(f"[{self.provider.value}] Search '{query}' returned {count} results")
