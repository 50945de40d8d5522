"""Action plan generation pipeline: stages, prompts, fallback plan and orchestration."""

from .enrichment import FieldEnricher
from .events import EventDiscovery, EventDiscoveryResult
from .fallback_plan import build_fallback_plan
from .generator import PlanGenerator
from .niche import DEFAULT_NICHE, NicheClassifier
from .outcome import StageOutcome
from .services import PipelineServices
from .validation import IdeaValidator

__all__ = [
    "DEFAULT_NICHE",
    "EventDiscovery",
    "EventDiscoveryResult",
    "FieldEnricher",
    "IdeaValidator",
    "NicheClassifier",
    "PipelineServices",
    "PlanGenerator",
    "StageOutcome",
    "build_fallback_plan",
]
