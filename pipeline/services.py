"""Per-run service bundle: explicitly constructed clients injected into the pipeline."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import httpx

from intelligence.llm import BaseLLM, get_llm
from orchestrator.progress import InMemoryProgressStore
from research import SearchOrchestrator
from .enrichment import FieldEnricher
from .events import EventDiscovery
from .generator import PlanGenerator
from .niche import NicheClassifier
from .validation import IdeaValidator


@dataclass
class PipelineServices:
    """
    Clients for one pipeline run.

    A fresh bundle (and so a fresh SearchOrchestrator with its own SerpAPI
    spacing state) is built for every request.
    """

    llm: BaseLLM
    search: SearchOrchestrator
    progress: InMemoryProgressStore
    events_timeframe: str = "12 months"
    generation_max_tokens: int = 6000

    @classmethod
    def from_settings(
        cls,
        settings,
        progress: InMemoryProgressStore,
        *,
        llm: Optional[BaseLLM] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> "PipelineServices":
        llm = llm or get_llm(settings=settings.llm)
        return cls(
            llm=llm,
            search=SearchOrchestrator.from_settings(settings, llm=llm, transport=transport),
            progress=progress,
            events_timeframe=settings.pipeline.events_timeframe,
            generation_max_tokens=settings.pipeline.generation_max_tokens,
        )

    def build_generator(self) -> PlanGenerator:
        return PlanGenerator(
            llm=self.llm,
            classifier=NicheClassifier(self.llm),
            discovery=EventDiscovery(self.search, self.llm),
            validator=IdeaValidator(self.llm),
            enricher=FieldEnricher(self.llm),
            progress=self.progress,
            events_timeframe=self.events_timeframe,
            generation_max_tokens=self.generation_max_tokens,
        )

    async def aclose(self) -> None:
        await self.llm.aclose()
