"""Stage 1: classify a channel into a specific niche."""

from __future__ import annotations

import logging
import re

from pydantic import ValidationError

from core import ChannelProfile, NicheProfile
from intelligence.llm import BaseLLM
from utils.exceptions import ParseError
from utils.json_extract import extract_json_object
from .outcome import DEFAULT, SIMPLIFIED, STRUCTURED, StageOutcome
from .prompts import niche_simple_prompt, niche_structured_prompt


logger = logging.getLogger(__name__)

DEFAULT_NICHE = NicheProfile(
    niche="Content Creation",
    broad_category="General",
    sub_categories=[],
    confidence="low",
    reasoning="Default fallback",
)

_MAX_SIMPLE_NICHE_LEN = 60


class NicheClassifier:
    """
    Degradation ladder: structured JSON prompt, then a simplified prompt
    asking for a bare niche string, then a hard-coded default profile.
    """

    def __init__(self, llm: BaseLLM):
        self.llm = llm

    async def classify(self, channel: ChannelProfile) -> NicheProfile:
        return (await self.run(channel)).value

    async def run(self, channel: ChannelProfile) -> StageOutcome[NicheProfile]:
        try:
            profile = await self._structured(channel)
            logger.info(f"Detected niche for '{channel.name}': {profile.niche} ({profile.confidence})")
            return StageOutcome.ok(profile, STRUCTURED)
        except Exception as exc:
            logger.warning(f"Structured niche detection failed for '{channel.name}': {exc}")
            first_error = exc

        try:
            profile = await self._simplified(channel)
            return StageOutcome.degrade(profile, SIMPLIFIED, first_error)
        except Exception as exc:
            logger.warning(f"Simplified niche detection failed for '{channel.name}': {exc}")
            return StageOutcome.degrade(DEFAULT_NICHE.model_copy(deep=True), DEFAULT, exc)

    async def _structured(self, channel: ChannelProfile) -> NicheProfile:
        content = await self.llm.achat(niche_structured_prompt(channel), temperature=0.3, max_tokens=400)
        data = extract_json_object(content)
        if data is None:
            raise ParseError("Could not parse niche detection JSON", stage="niche")
        try:
            return NicheProfile(
                niche=data.get("specificNiche") or data.get("niche"),
                broad_category=data.get("broadCategory"),
                sub_categories=data.get("subCategories") or [],
                confidence=data.get("confidence"),
                reasoning=data.get("reasoning"),
            )
        except ValidationError as exc:
            raise ParseError(f"Niche detection JSON is incomplete: {exc.error_count()} errors", stage="niche") from exc

    async def _simplified(self, channel: ChannelProfile) -> NicheProfile:
        content = await self.llm.achat(niche_simple_prompt(channel), temperature=0.3, max_tokens=50)
        lines = [line for line in str(content or "").strip().splitlines() if line.strip()]
        niche = re.sub(r"[\"'`*]", "", lines[0]).strip().rstrip(".") if lines else ""
        if not niche or len(niche) > _MAX_SIMPLE_NICHE_LEN:
            raise ParseError("Simplified niche answer is empty or not a short label", stage="niche")
        return NicheProfile(
            niche=niche,
            broad_category="Content Creation",
            sub_categories=[],
            confidence="low",
            reasoning="Fallback detection",
        )
