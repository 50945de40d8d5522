from __future__ import annotations

import asyncio

import pytest

from core import SearchProvider
from research import SearchOrchestrator
from utils.exceptions import ProviderError
from fakes import FakeSearchProvider, search_results


@pytest.mark.asyncio
async def test_first_successful_tier_wins_and_lower_tiers_are_not_called():
    primary = FakeSearchProvider(SearchProvider.PERPLEXITY, results=search_results(3, "news.example.com"))
    secondary = FakeSearchProvider(SearchProvider.SERPAPI, results=search_results(2))
    tertiary = FakeSearchProvider(SearchProvider.CLAUDE, results=search_results(1))

    response = await SearchOrchestrator([primary, secondary, tertiary]).search("ai news", max_results=5)

    assert response.success is True
    assert response.provider == SearchProvider.PERPLEXITY
    assert [item.source for item in response.results] == ["news.example.com"] * 3
    assert (primary.calls, secondary.calls, tertiary.calls) == (1, 0, 0)


@pytest.mark.asyncio
async def test_falls_through_on_provider_error_and_unexpected_exception():
    primary = FakeSearchProvider(SearchProvider.PERPLEXITY, error=ProviderError("429", provider="perplexity"))
    secondary = FakeSearchProvider(SearchProvider.SERPAPI, error=RuntimeError("boom"))
    tertiary = FakeSearchProvider(SearchProvider.CLAUDE, results=search_results(2, "claude-research"))

    response = await SearchOrchestrator([primary, secondary, tertiary]).search("ai news")

    assert response.provider == SearchProvider.CLAUDE
    assert len(response.results) == 2
    assert (primary.calls, secondary.calls, tertiary.calls) == (1, 1, 1)


@pytest.mark.asyncio
async def test_empty_results_count_as_failure():
    primary = FakeSearchProvider(SearchProvider.PERPLEXITY, results=[])
    secondary = FakeSearchProvider(SearchProvider.SERPAPI, results=search_results(1))

    response = await SearchOrchestrator([primary, secondary]).search("q")

    assert response.provider == SearchProvider.SERPAPI
    assert primary.calls == 1


@pytest.mark.asyncio
async def test_all_tiers_failing_returns_failed_response_without_raising():
    providers = [
        FakeSearchProvider(SearchProvider.PERPLEXITY, error=ProviderError("down", provider="perplexity")),
        FakeSearchProvider(SearchProvider.SERPAPI, error=ProviderError("down", provider="serpapi")),
        FakeSearchProvider(SearchProvider.CLAUDE, error=ProviderError("down", provider="claude")),
    ]

    response = await SearchOrchestrator(providers).search("anything")

    assert response.success is False
    assert response.provider == SearchProvider.NONE
    assert response.results == []
    assert response.error
    assert all(provider.calls == 1 for provider in providers)


@pytest.mark.asyncio
async def test_cancellation_propagates_through_search():
    primary = FakeSearchProvider(SearchProvider.PERPLEXITY, error=asyncio.CancelledError())
    secondary = FakeSearchProvider(SearchProvider.SERPAPI, results=search_results(1))

    with pytest.raises(asyncio.CancelledError):
        await SearchOrchestrator([primary, secondary]).search("q")
    assert secondary.calls == 0


def test_search_result_shape_drops_unknown_date():
    result = search_results(1)[0]
    assert set(result.model_dump(by_alias=True)) == {"title", "url", "snippet", "source", "relevance"}

    dated = result.model_copy(update={"date": "2025-03"})
    assert dated.model_dump(by_alias=True)["date"] == "2025-03"
