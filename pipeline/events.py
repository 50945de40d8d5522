"""Stage 2: discover real, dated events in a niche."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
import logging
from typing import Callable, List, Optional, Sequence

from pydantic import ValidationError

from core import Event, SearchProvider
from intelligence.llm import BaseLLM
from research import SearchOrchestrator
from utils.exceptions import ParseError
from utils.json_extract import extract_json_array, extract_json_object
from .outcome import FALLBACK, MODEL, StageOutcome
from .prompts import events_extraction_prompt, events_search_query


logger = logging.getLogger(__name__)

SEARCH_MAX_RESULTS = 15
EXTRACTION_INPUT_RESULTS = 10
MAX_EVENTS = 12


@dataclass
class EventDiscoveryResult:
    success: bool
    events: List[Event] = field(default_factory=list)
    provider: SearchProvider = SearchProvider.NONE
    summary: str = ""
    error: Optional[str] = None

    @classmethod
    def failed(cls, error: str) -> "EventDiscoveryResult":
        return cls(success=False, events=[], provider=SearchProvider.NONE, error=error)


class EventDiscovery:
    """
    Search for recent events, then extract structured Event records with the LLM.

    Extracted events are only shape-checked; whether the named entities really
    appear in the search results is left to the model.
    """

    def __init__(
        self,
        search: SearchOrchestrator,
        llm: BaseLLM,
        *,
        now: Optional[Callable[[], datetime]] = None,
    ):
        self.search = search
        self.llm = llm
        self._now = now

    async def find_events(
        self,
        niche: str,
        sub_categories: Sequence[str] = (),
        timeframe: str = "12 months",
    ) -> EventDiscoveryResult:
        return (await self.run(niche, sub_categories, timeframe)).value

    async def run(
        self,
        niche: str,
        sub_categories: Sequence[str] = (),
        timeframe: str = "12 months",
    ) -> StageOutcome[EventDiscoveryResult]:
        query = events_search_query(niche, sub_categories, now=self._now() if self._now else None)
        logger.info(f"Finding real events in {niche} (last {timeframe})")

        response = await self.search.search(query, max_results=SEARCH_MAX_RESULTS, include_content=True)
        if not response.success:
            error = response.error or "Search failed"
            return StageOutcome.degrade(EventDiscoveryResult.failed(error), FALLBACK, error)

        try:
            events = await self._extract(niche, timeframe, response.results, response.summary)
        except Exception as exc:
            logger.warning(f"Event extraction failed for {niche}: {exc}")
            return StageOutcome.degrade(EventDiscoveryResult.failed(str(exc)), FALLBACK, exc)

        logger.info(f"Found {len(events)} real events via {response.provider.value}")
        result = EventDiscoveryResult(
            success=True,
            events=events,
            provider=response.provider,
            summary=response.summary,
        )
        return StageOutcome.ok(result, MODEL)

    async def _extract(self, niche: str, timeframe: str, results, summary: str) -> List[Event]:
        prompt = events_extraction_prompt(niche, timeframe, results[:EXTRACTION_INPUT_RESULTS], summary)
        content = await self.llm.achat(prompt, temperature=0.5, max_tokens=3000)

        items = extract_json_array(content)
        if items is None:
            wrapped = extract_json_object(content) or {}
            items = wrapped.get("events") if isinstance(wrapped.get("events"), list) else None
        if items is None:
            raise ParseError("Could not parse events JSON", stage="events")

        events: List[Event] = []
        for item in items:
            if not isinstance(item, dict):
                continue
            try:
                events.append(Event.model_validate(item))
            except ValidationError as exc:
                logger.debug(f"Dropping malformed event: {exc.error_count()} errors")
            if len(events) >= MAX_EVENTS:
                break

        if not events:
            raise ParseError("Event extraction produced no valid events", stage="events")
        return events
