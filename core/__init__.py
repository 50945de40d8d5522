"""Core contracts and shared types for the action plan service."""

from .contracts import (
    CamelModel,
    ChannelProfile,
    ContentIdea,
    Event,
    GenerateRequest,
    NicheProfile,
    PipelineStage,
    ProgressState,
    SearchProvider,
    SearchResponse,
    SearchResult,
    VideoSummary,
)
from .plan import (
    ActionPlan,
    CompetitorAnalysis,
    ContentTemplate,
    EquipmentItem,
    EstimatedResults,
    MonetizationMethod,
    PlanMetadata,
    PlanTask,
    SuccessMetrics,
    WeekMetrics,
    WeekPlan,
)

__all__ = [
    "ActionPlan",
    "CamelModel",
    "ChannelProfile",
    "CompetitorAnalysis",
    "ContentIdea",
    "ContentTemplate",
    "EquipmentItem",
    "EstimatedResults",
    "Event",
    "GenerateRequest",
    "MonetizationMethod",
    "NicheProfile",
    "PipelineStage",
    "PlanMetadata",
    "PlanTask",
    "ProgressState",
    "SearchProvider",
    "SearchResponse",
    "SearchResult",
    "SuccessMetrics",
    "VideoSummary",
    "WeekMetrics",
    "WeekPlan",
]
