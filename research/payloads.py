"""Provider-specific raw payloads, one member per research tier.

Each payload is parsed at the adapter boundary and mapped straight into
canonical SearchResult records; nothing downstream sees these types.
"""

from __future__ import annotations

from typing import Annotated, Any, List, Literal, Optional, Union
from urllib.parse import urlparse

from pydantic import BaseModel, ConfigDict, Field, field_validator

from core import SearchResult


CLAUDE_RESEARCH_SOURCE = "claude-research"


def _hostname(url: str) -> str:
    try:
        host = urlparse(str(url or "")).hostname
    except ValueError:
        host = None
    return host or "unknown"


def _positional_relevance(index: int, total: int) -> float:
    if total <= 0:
        return 0.0
    return 1.0 - (index / total)


class _Raw(BaseModel):
    model_config = ConfigDict(extra="ignore")


class PerplexityCitation(_Raw):
    url: str = ""
    title: str = ""
    snippet: str = ""
    date: Optional[str] = None

    @classmethod
    def coerce(cls, value: Any) -> "PerplexityCitation":
        if isinstance(value, str):
            return cls(url=value)
        if isinstance(value, dict):
            data = dict(value)
            data.setdefault("snippet", data.get("text") or "")
            return cls.model_validate(data)
        return cls()


class PerplexityPayload(_Raw):
    kind: Literal["perplexity"] = "perplexity"
    content: str = ""
    citations: List[PerplexityCitation] = Field(default_factory=list)

    @field_validator("citations", mode="before")
    @classmethod
    def _citations(cls, value: Any) -> List[PerplexityCitation]:
        return [PerplexityCitation.coerce(item) for item in list(value or [])]

    @classmethod
    def from_api(cls, data: dict) -> "PerplexityPayload":
        choices = data.get("choices") or []
        message = (choices[0] or {}).get("message") if choices else {}
        content = str((message or {}).get("content") or "")
        # structured search_results carry titles and dates; bare citations are URLs only
        citations = data.get("search_results") or data.get("citations") or []
        return cls(content=content, citations=citations)

    def to_results(self, max_results: int) -> List[SearchResult]:
        total = len(self.citations)
        results: List[SearchResult] = []
        for index, citation in enumerate(self.citations[:max_results]):
            results.append(
                SearchResult(
                    title=citation.title or f"Source {index + 1}",
                    url=citation.url,
                    snippet=citation.snippet,
                    source=_hostname(citation.url) if citation.url else "unknown",
                    relevance=_positional_relevance(index, total),
                    date=citation.date,
                )
            )
        return results

    def summary(self, query: str, results: List[SearchResult]) -> str:
        return self.content


class SerpApiOrganic(_Raw):
    title: str = ""
    link: str = ""
    snippet: str = ""
    date: Optional[str] = None


class SerpApiPayload(_Raw):
    kind: Literal["serpapi"] = "serpapi"
    organic_results: List[SerpApiOrganic] = Field(default_factory=list)
    total_results: Optional[int] = None

    @classmethod
    def from_api(cls, data: dict) -> "SerpApiPayload":
        info = data.get("search_information") or {}
        total = info.get("total_results")
        try:
            total = int(total) if total is not None else None
        except (TypeError, ValueError):
            total = None
        return cls(organic_results=data.get("organic_results") or [], total_results=total)

    def to_results(self, max_results: int) -> List[SearchResult]:
        total = len(self.organic_results)
        return [
            SearchResult(
                title=item.title,
                url=item.link,
                snippet=item.snippet,
                source=_hostname(item.link) if item.link else "unknown",
                relevance=_positional_relevance(index, total),
                date=item.date,
            )
            for index, item in enumerate(self.organic_results[:max_results])
        ]

    def summary(self, query: str, results: List[SearchResult]) -> str:
        snippets = " ".join(result.snippet for result in results[:3] if result.snippet)
        return f'Search results for "{query}": {snippets}'.strip()


class ClaudeFinding(_Raw):
    title: str = ""
    snippet: str = ""
    url: Optional[str] = None
    date: Optional[str] = None
    entities: List[str] = Field(default_factory=list)
    relevance: Optional[float] = None

    @field_validator("relevance", mode="before")
    @classmethod
    def _relevance(cls, value: Any) -> Optional[float]:
        try:
            return float(value) if value is not None else None
        except (TypeError, ValueError):
            return None

    @field_validator("entities", mode="before")
    @classmethod
    def _entities(cls, value: Any) -> List[str]:
        if isinstance(value, str):
            value = value.split(",")
        return [str(item).strip() for item in list(value or []) if str(item).strip()]


class ClaudeResearchPayload(_Raw):
    kind: Literal["claude"] = "claude"
    summary_text: str = ""
    results: List[ClaudeFinding] = Field(default_factory=list)

    def to_results(self, max_results: int) -> List[SearchResult]:
        total = len(self.results)
        mapped: List[SearchResult] = []
        for index, finding in enumerate(self.results[:max_results]):
            if not finding.title.strip():
                continue
            relevance = finding.relevance
            if relevance is None:
                relevance = _positional_relevance(index, total)
            mapped.append(
                SearchResult(
                    title=finding.title,
                    url=finding.url or "",
                    snippet=finding.snippet,
                    source=CLAUDE_RESEARCH_SOURCE,
                    relevance=relevance,
                    date=finding.date,
                )
            )
        return mapped

    def summary(self, query: str, results: List[SearchResult]) -> str:
        return self.summary_text


ProviderPayload = Annotated[
    Union[PerplexityPayload, SerpApiPayload, ClaudeResearchPayload],
    Field(discriminator="kind"),
]
