"""Stage 3: cross-check content ideas against discovered events."""

from __future__ import annotations

import logging
from typing import List, Sequence

from pydantic import ValidationError

from core import ContentIdea, Event
from intelligence.llm import BaseLLM
from utils.exceptions import ParseError
from utils.json_extract import extract_json_array
from .outcome import MODEL, ORIGINAL, SKIPPED, StageOutcome
from .prompts import validation_prompt


logger = logging.getLogger(__name__)


class IdeaValidator:
    """Re-prompt the model to ground each idea in a real event; keep the originals on failure."""

    def __init__(self, llm: BaseLLM):
        self.llm = llm

    async def validate(self, ideas: Sequence[ContentIdea], events: Sequence[Event], niche: str) -> List[ContentIdea]:
        return (await self.run(ideas, events, niche)).value

    async def run(
        self,
        ideas: Sequence[ContentIdea],
        events: Sequence[Event],
        niche: str,
    ) -> StageOutcome[List[ContentIdea]]:
        originals = [item.model_copy(deep=True) for item in ideas]
        if not originals or not events:
            return StageOutcome.ok(originals, SKIPPED)

        logger.info(f"Validating {len(originals)} content ideas against {len(events)} real events")
        try:
            validated = await self._validate(originals, events, niche)
        except Exception as exc:
            logger.warning(f"Idea validation failed, keeping original ideas: {exc}")
            return StageOutcome.degrade(originals, ORIGINAL, exc)

        logger.info(f"Validated {len(validated)} content ideas")
        return StageOutcome.ok(validated, MODEL)

    async def _validate(self, ideas: List[ContentIdea], events: Sequence[Event], niche: str) -> List[ContentIdea]:
        content = await self.llm.achat(validation_prompt(ideas, events, niche), temperature=0.6, max_tokens=3000)
        items = extract_json_array(content)
        if items is None:
            raise ParseError("Could not parse validated ideas", stage="validation")

        validated: List[ContentIdea] = []
        for item in items:
            if not isinstance(item, dict):
                continue
            try:
                validated.append(ContentIdea.model_validate(item))
            except ValidationError:
                continue
        if not validated:
            raise ParseError("Validation returned no usable ideas", stage="validation")
        return validated
