"""Canonical data contracts shared by research, pipeline and web layers."""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
import re
from typing import Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_serializer, model_validator
from pydantic.alias_generators import to_camel

from utils.json_extract import strip_surrogates


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, (list, tuple)):
        return strip_surrogates(", ".join(str(item).strip() for item in value if str(item).strip()))
    return strip_surrogates(str(value)).strip()


class CamelModel(BaseModel):
    """Base model serialised with camelCase keys on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class SearchProvider(str, Enum):
    """Research provider tiers in priority order."""

    PERPLEXITY = "perplexity"
    SERPAPI = "serpapi"
    CLAUDE = "claude"
    NONE = "none"


class SearchResult(CamelModel):
    """Canonical research hit, whichever provider produced it."""

    title: str
    url: str = ""
    snippet: str = ""
    source: str = "unknown"
    relevance: float = 0.0
    date: Optional[str] = None

    @field_validator("title", "url", "snippet", "source", mode="before")
    @classmethod
    def _coerce_text(cls, value: Any) -> str:
        return _text(value)

    @field_validator("relevance", mode="before")
    @classmethod
    def _clamp_relevance(cls, value: Any) -> float:
        try:
            score = float(value)
        except (TypeError, ValueError):
            return 0.0
        return max(0.0, min(1.0, score))

    @field_validator("date", mode="before")
    @classmethod
    def _optional_date(cls, value: Any) -> Optional[str]:
        text = _text(value)
        return text or None

    @model_serializer(mode="wrap")
    def _drop_unknown_date(self, handler):
        data = handler(self)
        if data.get("date") is None:
            data.pop("date", None)
        return data


class SearchResponse(CamelModel):
    """Outcome of one orchestrated search."""

    success: bool
    provider: SearchProvider = SearchProvider.NONE
    query: str
    summary: str = ""
    results: List[SearchResult] = Field(default_factory=list)
    total_results: int = 0
    timestamp: datetime = Field(default_factory=_utcnow)
    error: Optional[str] = None

    @model_validator(mode="after")
    def _failed_means_empty(self) -> "SearchResponse":
        if not self.success and (self.results or self.provider != SearchProvider.NONE):
            raise ValueError("failed search responses carry no provider and no results")
        if self.success and not self.results:
            raise ValueError("successful search responses carry at least one result")
        return self

    @classmethod
    def failed(cls, query: str, error: str = "All search providers failed") -> "SearchResponse":
        return cls(success=False, provider=SearchProvider.NONE, query=query, results=[], error=error)


Confidence = Literal["high", "medium", "low"]


class NicheProfile(CamelModel):
    """Channel niche classification; every field is always populated."""

    niche: str
    broad_category: str
    sub_categories: List[str] = Field(default_factory=list)
    confidence: Confidence = "low"
    reasoning: str

    @field_validator("niche", "broad_category", "reasoning", mode="before")
    @classmethod
    def _required_text(cls, value: Any) -> str:
        text = _text(value)
        if not text:
            raise ValueError("value is required")
        return text

    @field_validator("sub_categories", mode="before")
    @classmethod
    def _tags(cls, value: Any) -> List[str]:
        if isinstance(value, str):
            value = value.split(",")
        return [_text(item) for item in list(value or []) if _text(item)]

    @field_validator("confidence", mode="before")
    @classmethod
    def _confidence(cls, value: Any) -> str:
        text = _text(value).lower()
        return text if text in {"high", "medium", "low"} else "low"


_EVENT_DATE = re.compile(r"^\s*(\d{4})[-/.](\d{1,2})")


class Event(CamelModel):
    """A real-world, dated occurrence used to ground content ideas."""

    title: str
    date: str
    description: str = ""
    entities: List[str] = Field(default_factory=list)
    video_angle: str = ""
    estimated_views: str = ""

    @field_validator("title", mode="before")
    @classmethod
    def _title(cls, value: Any) -> str:
        text = _text(value)
        if not text:
            raise ValueError("title is required")
        return text

    @field_validator("date", mode="before")
    @classmethod
    def _year_month(cls, value: Any) -> str:
        match = _EVENT_DATE.match(_text(value))
        if not match:
            raise ValueError("date must look like YYYY-MM")
        month = int(match.group(2))
        if not 1 <= month <= 12:
            raise ValueError("month out of range")
        return f"{match.group(1)}-{month:02d}"

    @field_validator("description", "video_angle", "estimated_views", mode="before")
    @classmethod
    def _coerce_text(cls, value: Any) -> str:
        return _text(value)

    @field_validator("entities", mode="before")
    @classmethod
    def _entities(cls, value: Any) -> List[str]:
        if isinstance(value, str):
            value = value.split(",")
        return [_text(item) for item in list(value or []) if _text(item)]


class ContentIdea(CamelModel):
    """A proposed video, optionally tied to a grounding event."""

    title: str
    hook: str = ""
    description: str = ""
    estimated_views: str = ""
    based_on_event: Optional[str] = None
    specifics: Optional[str] = None

    @field_validator("title", mode="before")
    @classmethod
    def _title(cls, value: Any) -> str:
        text = _text(value)
        if not text:
            raise ValueError("title is required")
        return text

    @field_validator("hook", "description", "estimated_views", mode="before")
    @classmethod
    def _coerce_text(cls, value: Any) -> str:
        return _text(value)

    @field_validator("based_on_event", "specifics", mode="before")
    @classmethod
    def _optional_text(cls, value: Any) -> Optional[str]:
        text = _text(value)
        return text or None


class PipelineStage(str, Enum):
    """Pipeline checkpoints in their fixed order, plus the terminal failure state."""

    INITIALIZING = "INITIALIZING"
    ANALYZING = "ANALYZING"
    RESEARCH = "RESEARCH"
    GENERATING = "GENERATING"
    VALIDATING = "VALIDATING"
    ENRICHING = "ENRICHING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"


class ProgressState(CamelModel):
    """Latest progress snapshot for one session id."""

    session_id: str
    stage: PipelineStage
    message: str = ""
    percent: int = Field(default=0, ge=0, le=100)
    updated_at: datetime = Field(default_factory=_utcnow)

    def public(self) -> Dict[str, Any]:
        return {"stage": self.stage.value, "message": self.message, "percent": self.percent}


class VideoSummary(CamelModel):
    title: str
    description: str = ""


class ChannelProfile(CamelModel):
    """Plain channel record consumed by niche classification."""

    name: str
    description: str = ""
    recent_videos: List[Union[str, VideoSummary]] = Field(default_factory=list)
    subscriber_count: int = 0
    view_count: int = 0
    video_count: int = 0
    published_at: Optional[str] = None

    @field_validator("subscriber_count", "view_count", "video_count", mode="before")
    @classmethod
    def _count(cls, value: Any) -> int:
        try:
            return max(0, int(value or 0))
        except (TypeError, ValueError):
            return 0

    @field_validator("description", mode="before")
    @classmethod
    def _description(cls, value: Any) -> str:
        return _text(value)

    def video_titles(self) -> List[str]:
        titles: List[str] = []
        for video in self.recent_videos:
            title = video if isinstance(video, str) else video.title
            if str(title).strip():
                titles.append(str(title).strip())
        return titles


class GenerateRequest(CamelModel):
    """Body of a plan generation request.

    channel_name and topic stay optional at the model level so the HTTP layer
    can answer missing fields with its own 400 payload.
    """

    channel_name: Optional[str] = None
    topic: Optional[str] = None
    channel_id: Optional[str] = None
    remix_analytics: Optional[Any] = None
    channel_analytics: Optional[Any] = None
    session_id: Optional[str] = None
    channel_bio: Optional[str] = None

    @field_validator("channel_name", "topic", "channel_id", "session_id", "channel_bio", mode="before")
    @classmethod
    def _optional_text(cls, value: Any) -> Optional[str]:
        text = str(value or "").strip()
        return text or None

    def dedup_key(self, user_id: str) -> str:
        return "|".join(
            [
                str(user_id).strip().lower(),
                str(self.channel_name or "").strip().lower(),
                str(self.topic or "").strip().lower(),
            ]
        )
