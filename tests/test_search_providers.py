from __future__ import annotations

import httpx
import pytest

from core import SearchProvider
from research import ClaudeSearchProvider, PerplexitySearchProvider, SerpApiSearchProvider
from utils.exceptions import LLMError, ProviderError
from fakes import RESEARCH, ScriptedLLM


def _serp_payload(count: int = 3) -> dict:
    return {
        "organic_results": [
            {"title": f"Story {idx}", "link": f"https://news{idx}.example.com/a", "snippet": f"S{idx}"}
            for idx in range(count)
        ],
        "search_information": {"total_results": 1200},
    }


@pytest.mark.asyncio
async def test_perplexity_maps_search_results_to_canonical_records():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["host"] = request.url.host
        seen["auth"] = request.headers.get("Authorization")
        return httpx.Response(
            200,
            json={
                "choices": [{"message": {"content": "Summary text"}}],
                "search_results": [
                    {"title": "A", "url": "https://www.theverge.com/a", "snippet": "first", "date": "2025-02-01"},
                    {"title": "B", "url": "https://techcrunch.com/b"},
                ],
            },
        )

    provider = PerplexitySearchProvider("pk", transport=httpx.MockTransport(handler))
    response = await provider.search("ai launches", max_results=10)

    assert seen == {"host": "api.perplexity.ai", "auth": "Bearer pk"}
    assert response.provider == SearchProvider.PERPLEXITY
    assert response.summary == "Summary text"
    assert [item.source for item in response.results] == ["www.theverge.com", "techcrunch.com"]
    assert [item.relevance for item in response.results] == [1.0, 0.5]
    assert response.results[0].date == "2025-02-01"
    assert response.results[1].date is None


@pytest.mark.asyncio
async def test_perplexity_bare_citations_get_positional_titles():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"choices": [{"message": {"content": "x"}}], "citations": ["https://a.com/x"]})

    provider = PerplexitySearchProvider("pk", transport=httpx.MockTransport(handler))
    response = await provider.search("q")

    assert response.results[0].title == "Source 1"
    assert response.results[0].source == "a.com"


@pytest.mark.asyncio
async def test_http_error_status_raises_provider_error():
    provider = PerplexitySearchProvider(
        "pk",
        transport=httpx.MockTransport(lambda request: httpx.Response(429, text="rate limited")),
    )
    with pytest.raises(ProviderError) as excinfo:
        await provider.search("q")
    assert excinfo.value.provider == "perplexity"


@pytest.mark.asyncio
async def test_unconfigured_provider_makes_no_http_call():
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(200, json=_serp_payload())

    provider = SerpApiSearchProvider(None, transport=httpx.MockTransport(handler))
    with pytest.raises(ProviderError):
        await provider.search("q")
    assert calls == []


@pytest.mark.asyncio
async def test_serpapi_summary_total_and_content_stripping():
    provider = SerpApiSearchProvider(
        "sk",
        min_interval_sec=0,
        transport=httpx.MockTransport(lambda request: httpx.Response(200, json=_serp_payload(4))),
    )

    response = await provider.search("gadgets", max_results=10)
    assert response.summary == 'Search results for "gadgets": S0 S1 S2'
    assert response.total_results == 1200
    assert response.results[0].source == "news0.example.com"

    stripped = await provider.search("gadgets", include_content=False)
    assert all(item.snippet == "" for item in stripped.results)


@pytest.mark.asyncio
async def test_serpapi_calls_are_spaced_at_least_one_second_apart():
    clock = {"now": 100.0}
    call_times = []
    sleeps = []

    async def fake_sleep(delay: float) -> None:
        sleeps.append(delay)
        clock["now"] += delay

    def handler(request: httpx.Request) -> httpx.Response:
        call_times.append(clock["now"])
        return httpx.Response(200, json=_serp_payload(1))

    provider = SerpApiSearchProvider(
        "sk",
        min_interval_sec=1.0,
        transport=httpx.MockTransport(handler),
        clock=lambda: clock["now"],
        sleep=fake_sleep,
    )

    await provider.search("one")
    clock["now"] += 0.2
    await provider.search("two")
    clock["now"] += 5.0
    await provider.search("three")

    assert call_times[1] - call_times[0] >= 1.0
    assert sleeps == [pytest.approx(0.8)]
    assert call_times[2] - call_times[1] >= 1.0


@pytest.mark.asyncio
async def test_claude_research_tier_parses_findings():
    llm = ScriptedLLM(
        [
            (
                RESEARCH,
                {
                    "summary": "Recent AI news",
                    "results": [
                        {"title": "OpenAI ships model", "snippet": "details", "date": "2025-01", "relevance": 0.9},
                        "not a finding",
                        {"title": "", "snippet": "untitled"},
                    ],
                },
            )
        ]
    )

    response = await ClaudeSearchProvider(llm).search("ai news")

    assert response.provider == SearchProvider.CLAUDE
    assert response.summary == "Recent AI news"
    assert len(response.results) == 1
    assert response.results[0].source == "claude-research"
    assert response.results[0].url == ""
    assert response.results[0].relevance == 0.9


@pytest.mark.asyncio
async def test_claude_research_model_failure_is_a_provider_error():
    llm = ScriptedLLM(default=LLMError("overloaded", provider="anthropic"))
    with pytest.raises(ProviderError):
        await ClaudeSearchProvider(llm).search("q")
