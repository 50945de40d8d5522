"""Tiered search orchestrator: strict priority order, first success wins."""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence

import httpx

from core import SearchResponse
from intelligence.llm import BaseLLM
from utils.exceptions import ProviderError
from .base import BaseSearchProvider
from .claude_search import ClaudeSearchProvider
from .perplexity import PerplexitySearchProvider
from .serpapi import SerpApiSearchProvider


logger = logging.getLogger(__name__)


class SearchOrchestrator:
    """
    Try research providers in order until one answers with results.

    Results are never merged across providers, and a lower tier is never
    called once a higher tier has succeeded. search() never raises; task
    cancellation is the only exception that escapes.
    """

    def __init__(self, providers: Sequence[BaseSearchProvider]):
        self._providers: List[BaseSearchProvider] = list(providers)

    @property
    def providers(self) -> List[BaseSearchProvider]:
        return list(self._providers)

    @classmethod
    def from_settings(
        cls,
        settings,
        *,
        llm: Optional[BaseLLM] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> "SearchOrchestrator":
        search = settings.search
        providers: List[BaseSearchProvider] = [
            PerplexitySearchProvider(
                search.perplexity_api_key,
                model=search.perplexity_model,
                timeout=search.request_timeout,
                transport=transport,
            ),
            SerpApiSearchProvider(
                search.serpapi_api_key,
                min_interval_sec=search.serpapi_min_interval_sec,
                timeout=search.request_timeout,
                transport=transport,
            ),
        ]
        if search.enable_claude_fallback:
            providers.append(ClaudeSearchProvider(llm))
        return cls(providers)

    async def search(
        self,
        query: str,
        *,
        max_results: int = 10,
        include_content: bool = True,
    ) -> SearchResponse:
        logger.info(f"Multi-tier search for: '{query}'")
        for provider in self._providers:
            name = provider.provider.value
            try:
                response = await provider.search(
                    query,
                    max_results=max_results,
                    include_content=include_content,
                )
            except ProviderError as exc:
                logger.warning(f"[{name}] search failed, falling through: {exc.message}")
                continue
            except Exception as exc:
                logger.warning(f"[{name}] search raised {type(exc).__name__}, falling through: {exc}")
                continue

            if response.success and response.results:
                logger.info(f"[{name}] search succeeded with {len(response.results)} results")
                return response

        logger.error(f"All search providers failed for: '{query}'")
        return SearchResponse.failed(query)
