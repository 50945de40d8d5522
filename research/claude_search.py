"""Tier C: research answered directly by the LLM, as structured JSON."""

from __future__ import annotations

from typing import Optional

from core import SearchProvider
from intelligence.llm import BaseLLM
from utils.exceptions import LLMError, ProviderError
from utils.json_extract import extract_json_object
from .base import BaseSearchProvider
from .payloads import ClaudeResearchPayload


RESEARCH_PROMPT = """Research and provide comprehensive information about: "{query}"

Focus on:
1. Recent events and developments (last 12 months)
2. Specific incidents, companies, people, and dates
3. Factual, verifiable information

Provide your response in this JSON format:
{{
  "summary": "Overall summary of findings",
  "results": [
    {{
      "title": "Specific event or topic title",
      "snippet": "Detailed description with specifics",
      "date": "Approximate date (YYYY-MM or YYYY-MM-DD if known)",
      "entities": ["Company/Person/Location names mentioned"],
      "relevance": 0.9
    }}
  ]
}}

Return at most {max_results} results."""


class ClaudeSearchProvider(BaseSearchProvider):
    """Last-resort research tier; results carry no URLs and should be verified independently."""

    def __init__(self, llm: Optional[BaseLLM], *, max_tokens: int = 3000, temperature: float = 0.3):
        super().__init__()
        self.llm = llm
        self.max_tokens = max_tokens
        self.temperature = temperature

    @property
    def provider(self) -> SearchProvider:
        return SearchProvider.CLAUDE

    def is_configured(self) -> bool:
        return self.llm is not None

    async def _fetch(self, query: str, max_results: int) -> ClaudeResearchPayload:
        prompt = RESEARCH_PROMPT.format(query=query, max_results=max_results)
        try:
            content = await self.llm.achat(prompt, temperature=self.temperature, max_tokens=self.max_tokens)
        except LLMError as exc:
            raise ProviderError(f"Claude research failed: {exc.message}", provider=self.provider.value) from exc

        data = extract_json_object(content)
        if data is None:
            raise ProviderError("Could not parse Claude research response", provider=self.provider.value)

        summary = str(data.get("summary") or "").strip() or content[:500]
        results = data.get("results")
        findings = [item for item in results if isinstance(item, dict)] if isinstance(results, list) else []
        return ClaudeResearchPayload(summary_text=summary, results=findings)
