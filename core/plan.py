"""ActionPlan contract: the 30-day plan returned to the caller and stored."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, List, Literal, Optional

from pydantic import Field, field_validator

from .contracts import CamelModel, ContentIdea, SearchProvider, _text


REQUIRED_PLAN_KEYS = ("weeklyPlan", "contentTemplates")

WEEKS_PER_PLAN = 4
TASKS_PER_WEEK = 5
TEMPLATES_PER_PLAN = 3
EQUIPMENT_PER_PLAN = 5

UNDEFINED_SENTINEL = "undefined"


class _TextFields(CamelModel):
    @field_validator("*", mode="before")
    @classmethod
    def _stringify(cls, value: Any, info) -> Any:
        annotation = cls.model_fields[info.field_name].annotation
        if annotation is str:
            return _text(value)
        return value


class EstimatedResults(_TextFields):
    views: str = ""
    subscribers: str = ""
    revenue: str = ""


class PlanTask(_TextFields):
    id: str
    task: str
    priority: Literal["high", "medium", "low"] = "medium"

    @field_validator("priority", mode="before")
    @classmethod
    def _priority(cls, value: Any) -> str:
        text = _text(value).lower()
        return text if text in {"high", "medium", "low"} else "medium"


class WeekPlan(_TextFields):
    week: int
    theme: str
    tasks: List[PlanTask] = Field(default_factory=list)


class ContentTemplate(_TextFields):
    """Video template; format and hook may arrive empty and get enriched later."""

    type: str
    title: str
    format: Optional[str] = None
    hook: Optional[str] = None
    structure: str = ""
    duration: str = ""

    @field_validator("format", "hook", mode="before")
    @classmethod
    def _optional_text(cls, value: Any) -> Optional[str]:
        text = _text(value)
        return text or None


class EquipmentItem(_TextFields):
    item: str
    purpose: Optional[str] = None
    essential: bool = False
    budget: str = ""

    @field_validator("purpose", mode="before")
    @classmethod
    def _optional_text(cls, value: Any) -> Optional[str]:
        text = _text(value)
        return text or None

    @field_validator("essential", mode="before")
    @classmethod
    def _essential(cls, value: Any) -> bool:
        if isinstance(value, str):
            return value.strip().lower() in {"true", "yes", "1", "essential"}
        return bool(value)


class WeekMetrics(_TextFields):
    views: str = ""
    subscribers: str = ""
    engagement: str = ""


class SuccessMetrics(CamelModel):
    week1: WeekMetrics = Field(default_factory=WeekMetrics)
    week2: WeekMetrics = Field(default_factory=WeekMetrics)
    week3: WeekMetrics = Field(default_factory=WeekMetrics)
    week4: WeekMetrics = Field(default_factory=WeekMetrics)


class CompetitorAnalysis(CamelModel):
    top_channels: List[str] = Field(default_factory=list)
    success_factors: List[str] = Field(default_factory=list)
    gaps: List[str] = Field(default_factory=list)


class MonetizationMethod(_TextFields):
    method: str
    timeline: str = ""
    potential: str = ""


class PlanMetadata(CamelModel):
    """Provenance attached to every plan, whichever path produced it."""

    detected_niche: str
    niche_confidence: str = "low"
    real_events_used: int = 0
    search_provider: SearchProvider = SearchProvider.NONE
    generated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    used_fallback: bool = False


class ActionPlan(CamelModel):
    """Total 30-day action plan: every required collection is always present."""

    strategy: str
    timeline: str = "30 Days"
    estimated_results: EstimatedResults = Field(default_factory=EstimatedResults)
    weekly_plan: List[WeekPlan]
    content_templates: List[ContentTemplate]
    keywords: List[str] = Field(default_factory=list)
    equipment: List[EquipmentItem] = Field(default_factory=list)
    success_metrics: SuccessMetrics = Field(default_factory=SuccessMetrics)
    content_ideas: List[ContentIdea] = Field(default_factory=list)
    competitor_analysis: Optional[CompetitorAnalysis] = None
    monetization_strategy: Optional[List[MonetizationMethod]] = None
    channel: Optional[str] = None
    topic: Optional[str] = None
    metadata: Optional[PlanMetadata] = None

    @field_validator("keywords", mode="before")
    @classmethod
    def _keywords(cls, value: Any) -> List[str]:
        if isinstance(value, str):
            value = value.split(",")
        return [_text(item) for item in list(value or []) if _text(item)]

    def to_public(self) -> dict:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


def is_missing(value: Optional[str]) -> bool:
    """True for empty values and values carrying the literal "undefined" sentinel."""
    text = str(value or "").strip()
    return not text or UNDEFINED_SENTINEL in text.lower()
