from __future__ import annotations

from datetime import datetime, timezone

import pytest

from core import SearchProvider
from pipeline import EventDiscovery
from research import SearchOrchestrator
from utils.exceptions import ProviderError
from fakes import EVENTS, FakeSearchProvider, ScriptedLLM, events_payload, failing_llm, search_results


def _fixed_now() -> datetime:
    return datetime(2025, 6, 1, tzinfo=timezone.utc)


def _failing_tiers():
    return [
        FakeSearchProvider(SearchProvider.PERPLEXITY, error=ProviderError("down", provider="perplexity")),
        FakeSearchProvider(SearchProvider.SERPAPI, error=ProviderError("down", provider="serpapi")),
        FakeSearchProvider(SearchProvider.CLAUDE, error=ProviderError("down", provider="claude")),
    ]


@pytest.mark.asyncio
async def test_ai_tool_reviews_with_every_provider_failing_yields_no_events():
    tiers = _failing_tiers()
    llm = failing_llm()

    result = await EventDiscovery(SearchOrchestrator(tiers), llm).find_events("AI Tool Reviews", [], "12 months")

    assert result.success is False
    assert result.events == []
    assert result.provider == SearchProvider.NONE
    assert all(tier.calls == 1 for tier in tiers)
    assert llm.calls(EVENTS) == 0


@pytest.mark.asyncio
async def test_extracts_events_from_top_ten_results():
    tier = FakeSearchProvider(SearchProvider.PERPLEXITY, results=search_results(15), summary="AI summary")
    llm = ScriptedLLM([(EVENTS, events_payload(3) + [{"title": "No date"}, "junk"])])

    discovery = EventDiscovery(SearchOrchestrator([tier]), llm, now=_fixed_now)
    result = await discovery.find_events("AI Tools", ["chatbots", "agents"], "12 months")

    assert result.success is True
    assert result.provider == SearchProvider.PERPLEXITY
    assert [event.title for event in result.events] == [f"Acme Corp launches Widget {idx}" for idx in range(3)]
    assert result.events[0].date == "2025-01"
    assert tier.queries == ["major AI Tools events incidents news 2025 2024 chatbots agents"]

    prompt = llm.prompts[0]
    assert '"Result 9"' in prompt
    assert '"Result 10"' not in prompt


@pytest.mark.asyncio
async def test_keeps_at_most_twelve_events():
    tier = FakeSearchProvider(SearchProvider.SERPAPI, results=search_results(3))
    many = [dict(item, title=f"Event {idx}") for idx, item in enumerate(events_payload(1) * 20)]
    llm = ScriptedLLM([(EVENTS, {"events": many})])

    result = await EventDiscovery(SearchOrchestrator([tier]), llm).find_events("Gaming", [], "12 months")

    assert len(result.events) == 12


@pytest.mark.asyncio
async def test_extraction_failure_after_search_reports_no_provider():
    tier = FakeSearchProvider(SearchProvider.PERPLEXITY, results=search_results(3))
    llm = ScriptedLLM([(EVENTS, "I could not find any events.")])

    outcome = await EventDiscovery(SearchOrchestrator([tier]), llm).run("Cooking", [], "12 months")

    assert outcome.degraded is True
    assert outcome.value.success is False
    assert outcome.value.events == []
    assert outcome.value.provider == SearchProvider.NONE
