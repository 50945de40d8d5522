from __future__ import annotations

import json

import pytest

from core import ChannelProfile, GenerateRequest, PipelineStage, SearchProvider
from orchestrator.progress import InMemoryProgressStore
from pipeline import PipelineServices, build_fallback_plan
from research import SearchOrchestrator
from utils.exceptions import ProviderError
from fakes import (
    EVENTS,
    NICHE_STRUCTURED,
    PLAN,
    VALIDATION,
    FakeSearchProvider,
    ScriptedLLM,
    events_payload,
    failing_llm,
    plan_payload,
    search_results,
)


REQUEST = GenerateRequest(channel_name="CodeLab", topic="Python")
CHANNEL = ChannelProfile(name="CodeLab")


def _generator(llm, tiers, progress=None):
    services = PipelineServices(
        llm=llm,
        search=SearchOrchestrator(tiers),
        progress=progress or InMemoryProgressStore(),
    )
    return services.build_generator()


def _dead_tiers():
    return [
        FakeSearchProvider(SearchProvider.PERPLEXITY, error=ProviderError("down", provider="perplexity")),
        FakeSearchProvider(SearchProvider.SERPAPI, error=ProviderError("down", provider="serpapi")),
    ]


def _niche_reply():
    return {
        "broadCategory": "Education",
        "specificNiche": "Python Tutorials",
        "subCategories": ["beginner python"],
        "confidence": "medium",
        "reasoning": "Channel name",
    }


@pytest.mark.asyncio
async def test_model_plan_is_normalised_to_fixed_collection_sizes():
    progress = InMemoryProgressStore()
    llm = ScriptedLLM(
        [
            (PLAN, plan_payload(weeks=6, templates=2, equipment=7)),
            (NICHE_STRUCTURED, _niche_reply()),
            (EVENTS, events_payload(3)),
            (VALIDATION, [{"title": "Acme Widget 0 explained", "basedOnEvent": "Acme Corp launches Widget 0"}]),
        ]
    )
    tier = FakeSearchProvider(SearchProvider.PERPLEXITY, results=search_results(5))

    plan = await _generator(llm, [tier], progress).generate(REQUEST, channel=CHANNEL, session_id="s1")

    assert len(plan.weekly_plan) == 4
    assert [week.week for week in plan.weekly_plan] == [1, 2, 3, 4]
    assert len(plan.content_templates) == 3
    assert plan.content_templates[2] == build_fallback_plan("CodeLab", "Python").content_templates[2]
    assert len(plan.equipment) == 5
    assert [idea.title for idea in plan.content_ideas] == ["Acme Widget 0 explained"]

    assert plan.metadata.detected_niche == "Python Tutorials"
    assert plan.metadata.niche_confidence == "medium"
    assert plan.metadata.real_events_used == 3
    assert plan.metadata.search_provider == SearchProvider.PERPLEXITY
    assert plan.metadata.used_fallback is False
    assert plan.channel == "CodeLab"
    assert plan.topic == "Python"

    history = progress.history("s1")
    percents = [state.percent for state in history]
    assert percents == sorted(percents)
    assert percents[-1] == 100
    assert all(p < 100 for p in percents[:-1])
    stages = [state.stage for state in history]
    assert PipelineStage.VALIDATING in stages
    assert stages[-1] == PipelineStage.COMPLETED


@pytest.mark.asyncio
async def test_everything_failing_still_yields_fallback_plan_with_metadata():
    progress = InMemoryProgressStore()
    tiers = _dead_tiers()

    plan = await _generator(failing_llm(), tiers, progress).generate(REQUEST, channel=CHANNEL, session_id="s2")

    assert len(plan.weekly_plan) == 4
    assert len(plan.content_templates) == 3
    assert plan.metadata.used_fallback is True
    assert plan.metadata.real_events_used == 0
    assert plan.metadata.search_provider == SearchProvider.NONE
    assert plan.metadata.detected_niche == "Content Creation"

    stages = [state.stage for state in progress.history("s2")]
    assert PipelineStage.VALIDATING not in stages
    assert progress.read("s2").percent == 100


@pytest.mark.asyncio
async def test_fallback_plan_is_structurally_identical_across_runs():
    first = await _generator(failing_llm(), _dead_tiers()).generate(REQUEST, channel=CHANNEL, session_id="a")
    second = await _generator(failing_llm(), _dead_tiers()).generate(REQUEST, channel=CHANNEL, session_id="b")

    one = first.to_public()
    two = second.to_public()
    one["metadata"].pop("generatedAt")
    two["metadata"].pop("generatedAt")
    assert one == two


@pytest.mark.asyncio
async def test_missing_required_key_swaps_in_fallback():
    payload = plan_payload()
    payload.pop("contentTemplates")
    llm = ScriptedLLM([(PLAN, payload), (NICHE_STRUCTURED, _niche_reply())])

    plan = await _generator(llm, _dead_tiers()).generate(REQUEST, channel=CHANNEL, session_id="s3")

    assert plan.metadata.used_fallback is True
    assert plan.strategy == build_fallback_plan("CodeLab", "Python").strategy
    assert plan.metadata.detected_niche == "Python Tutorials"


@pytest.mark.asyncio
async def test_truncated_plan_response_is_recovered():
    text = '```json\n' + json.dumps(plan_payload())[:-40]
    llm = ScriptedLLM([(PLAN, text), (NICHE_STRUCTURED, _niche_reply())])

    plan = await _generator(llm, _dead_tiers()).generate(REQUEST, channel=CHANNEL, session_id="s4")

    assert plan.metadata.used_fallback is False
    assert plan.strategy == "Rapid Growth Strategy"
    assert len(plan.weekly_plan) == 4
