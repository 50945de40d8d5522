from __future__ import annotations

import pytest

from core import ChannelProfile
from pipeline import DEFAULT_NICHE, NicheClassifier
from pipeline.outcome import DEFAULT, SIMPLIFIED, STRUCTURED
from fakes import NICHE_SIMPLE, NICHE_STRUCTURED, ScriptedLLM, failing_llm


CODELAB = ChannelProfile(name="CodeLab", description="", recent_videos=[])


@pytest.mark.asyncio
async def test_structured_answer_is_used_when_parseable():
    llm = ScriptedLLM(
        [
            (
                NICHE_STRUCTURED,
                'Sure!\n```json\n{"broadCategory": "Education", "specificNiche": "Python Tutorials", '
                '"subCategories": ["beginner python", "automation"], "confidence": "HIGH", "reasoning": "Video titles"}\n```',
            )
        ]
    )

    outcome = await NicheClassifier(llm).run(ChannelProfile(name="PyDaily", recent_videos=["Learn Python in 10 min"]))

    assert outcome.level == STRUCTURED
    assert outcome.degraded is False
    assert outcome.value.niche == "Python Tutorials"
    assert outcome.value.sub_categories == ["beginner python", "automation"]
    assert outcome.value.confidence == "high"


@pytest.mark.asyncio
async def test_codelab_falls_back_to_simplified_prompt_with_low_confidence():
    llm = ScriptedLLM(
        [
            (NICHE_STRUCTURED, "I cannot tell much about this channel."),
            (NICHE_SIMPLE, "Coding Tutorials"),
        ]
    )

    outcome = await NicheClassifier(llm).run(CODELAB)

    assert outcome.level == SIMPLIFIED
    assert outcome.value.niche == "Coding Tutorials"
    assert outcome.value.broad_category == "Content Creation"
    assert outcome.value.confidence == "low"
    assert outcome.value.reasoning == "Fallback detection"
    assert llm.calls(NICHE_STRUCTURED) == 1
    assert llm.calls(NICHE_SIMPLE) == 1


@pytest.mark.asyncio
async def test_incomplete_structured_json_counts_as_parse_failure():
    llm = ScriptedLLM(
        [
            (NICHE_STRUCTURED, {"broadCategory": "Tech", "confidence": "high"}),
            (NICHE_SIMPLE, '"Gadget Reviews".'),
        ]
    )

    profile = await NicheClassifier(llm).classify(CODELAB)

    assert profile.niche == "Gadget Reviews"
    assert profile.confidence == "low"


@pytest.mark.asyncio
async def test_classify_is_total_when_model_always_fails():
    outcome = await NicheClassifier(failing_llm()).run(CODELAB)

    assert outcome.level == DEFAULT
    assert outcome.degraded is True
    assert outcome.value == DEFAULT_NICHE
    assert outcome.value.niche and outcome.value.broad_category and outcome.value.reasoning


@pytest.mark.asyncio
async def test_overlong_simplified_answer_uses_default():
    llm = ScriptedLLM(
        [
            (NICHE_STRUCTURED, "nope"),
            (NICHE_SIMPLE, "This channel seems to be about many different things and I am not sure which one fits"),
        ]
    )

    profile = await NicheClassifier(llm).classify(CODELAB)
    assert profile.niche == DEFAULT_NICHE.niche
