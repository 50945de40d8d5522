"""Plan generation state machine: analyze, research, generate, validate, enrich."""

from __future__ import annotations

from datetime import datetime, timezone
import logging

from core import ActionPlan, ChannelProfile, GenerateRequest, NicheProfile, PipelineStage, PlanMetadata
from intelligence.llm import BaseLLM
from orchestrator.progress import InMemoryProgressStore, ProgressReporter
from utils.exceptions import ParseError
from utils.json_extract import extract_json_object
from .enrichment import FieldEnricher
from .events import EventDiscovery, EventDiscoveryResult
from .fallback_plan import build_fallback_plan
from .niche import NicheClassifier
from .normalize import normalize_plan
from .outcome import FALLBACK, MODEL, StageOutcome
from .prompts import plan_prompt
from .validation import IdeaValidator


logger = logging.getLogger(__name__)


class PlanGenerator:
    """
    Run every stage in order, writing a progress checkpoint on entry.

    generate() is total: any failure while producing the plan itself swaps in
    the static fallback plan, and stage failures degrade instead of aborting.
    Only asyncio cancellation escapes.
    """

    def __init__(
        self,
        *,
        llm: BaseLLM,
        classifier: NicheClassifier,
        discovery: EventDiscovery,
        validator: IdeaValidator,
        enricher: FieldEnricher,
        progress: InMemoryProgressStore,
        events_timeframe: str = "12 months",
        generation_max_tokens: int = 6000,
    ):
        self.llm = llm
        self.classifier = classifier
        self.discovery = discovery
        self.validator = validator
        self.enricher = enricher
        self.progress = progress
        self.events_timeframe = events_timeframe
        self.generation_max_tokens = generation_max_tokens

    async def generate(
        self,
        request: GenerateRequest,
        *,
        channel: ChannelProfile,
        session_id: str,
        channel_analytics: str = "",
    ) -> ActionPlan:
        report = ProgressReporter(self.progress, session_id)
        channel_name = request.channel_name or channel.name
        topic = request.topic or ""

        report.enter(PipelineStage.INITIALIZING, "Starting action plan generation")

        report.enter(PipelineStage.ANALYZING, f"Analyzing channel {channel_name}")
        niche_outcome = await self.classifier.run(channel)
        self._log_outcome("niche", niche_outcome)
        niche = niche_outcome.value
        report.advance(PipelineStage.ANALYZING, f"Detected niche: {niche.niche}")

        report.enter(PipelineStage.RESEARCH, f"Researching recent {niche.niche} events")
        events_outcome = await self.discovery.run(niche.niche, niche.sub_categories, self.events_timeframe)
        self._log_outcome("events", events_outcome)
        discovery: EventDiscoveryResult = events_outcome.value
        report.advance(PipelineStage.RESEARCH, f"Found {len(discovery.events)} real events")

        report.enter(PipelineStage.GENERATING, "Generating your 30-day action plan")
        plan_outcome = await self._draft_plan(
            request,
            channel_name=channel_name,
            topic=topic,
            niche=niche,
            discovery=discovery,
            channel_analytics=channel_analytics,
        )
        self._log_outcome("generation", plan_outcome)
        plan = plan_outcome.value
        used_fallback = plan_outcome.level == FALLBACK
        report.advance(
            PipelineStage.GENERATING,
            "Using a proven template plan" if used_fallback else "Plan drafted",
        )

        if discovery.events and plan.content_ideas:
            report.enter(PipelineStage.VALIDATING, "Grounding content ideas in real events")
            ideas_outcome = await self.validator.run(plan.content_ideas, discovery.events, niche.niche)
            self._log_outcome("validation", ideas_outcome)
            plan.content_ideas = ideas_outcome.value

        report.enter(PipelineStage.ENRICHING, "Polishing templates and equipment")
        enrich_outcome = await self.enricher.run(plan, niche.niche)
        self._log_outcome("enrichment", enrich_outcome)
        plan = enrich_outcome.value

        plan.channel = channel_name
        plan.topic = topic
        plan.metadata = PlanMetadata(
            detected_niche=niche.niche,
            niche_confidence=niche.confidence,
            real_events_used=len(discovery.events),
            search_provider=discovery.provider,
            generated_at=datetime.now(timezone.utc),
            used_fallback=used_fallback,
        )

        report.enter(PipelineStage.COMPLETED, "Action plan ready")
        return plan

    async def _draft_plan(
        self,
        request: GenerateRequest,
        *,
        channel_name: str,
        topic: str,
        niche: NicheProfile,
        discovery: EventDiscoveryResult,
        channel_analytics: str,
    ) -> StageOutcome[ActionPlan]:
        fallback = build_fallback_plan(channel_name, topic, niche.niche)
        prompt = plan_prompt(
            channel_name=channel_name,
            topic=topic,
            niche=niche,
            events=discovery.events,
            channel_analytics=channel_analytics,
            remix_analytics=request.remix_analytics,
            extra_channel_analytics=request.channel_analytics,
        )
        try:
            response = await self.llm.achat(prompt, temperature=0.7, max_tokens=self.generation_max_tokens)
            data = extract_json_object(response)
            if data is None:
                raise ParseError("No JSON object found in plan response", stage="generation")
            plan = normalize_plan(data, fallback)
        except Exception as exc:
            logger.warning(f"Plan generation failed, using fallback plan: {exc}")
            return StageOutcome.degrade(fallback, FALLBACK, exc)
        return StageOutcome.ok(plan, MODEL)

    @staticmethod
    def _log_outcome(stage: str, outcome: StageOutcome) -> None:
        if outcome.degraded:
            logger.warning(f"[{stage}] degraded to '{outcome.level}': {outcome.error}")
        else:
            logger.info(f"[{stage}] completed ({outcome.level})")

