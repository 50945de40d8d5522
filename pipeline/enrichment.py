"""Stage 4: fill missing template and equipment fields, one item at a time."""

from __future__ import annotations

import logging
from typing import List

from core import ActionPlan
from core.plan import ContentTemplate, EquipmentItem, is_missing
from intelligence.llm import BaseLLM
from utils.exceptions import ParseError
from utils.json_extract import extract_json_object
from .outcome import FALLBACK, MODEL, SKIPPED, StageOutcome
from .prompts import equipment_enrichment_prompt, template_enrichment_prompt


logger = logging.getLogger(__name__)

DEFAULT_FORMAT = "Standard format"
DEFAULT_HOOK = "Hook viewers in the first 15 seconds..."
MAX_PURPOSE_LEN = 100


def fallback_purpose(niche: str) -> str:
    return f"Essential for {niche} content production"


class FieldEnricher:
    """
    Only items with a missing, blank or "undefined" field get a model call.
    Each item gets exactly one attempt; a failure falls back to deterministic
    values for that item alone.
    """

    def __init__(self, llm: BaseLLM):
        self.llm = llm

    async def enrich(self, plan: ActionPlan, niche: str) -> ActionPlan:
        return (await self.run(plan, niche)).value

    async def run(self, plan: ActionPlan, niche: str) -> StageOutcome[ActionPlan]:
        enriched = plan.model_copy(deep=True)
        calls = 0
        failures: List[str] = []

        for idx, template in enumerate(enriched.content_templates):
            if not (is_missing(template.format) or is_missing(template.hook)):
                continue
            calls += 1
            try:
                await self._enrich_template(template, niche)
            except Exception as exc:
                logger.warning(f"Failed to enrich template {idx}: {exc}")
                failures.append(f"template[{idx}]")
                self._template_fallback(template)

        for idx, item in enumerate(enriched.equipment):
            if not is_missing(item.purpose):
                continue
            calls += 1
            try:
                await self._enrich_equipment(item, niche)
            except Exception as exc:
                logger.warning(f"Failed to enrich equipment {idx}: {exc}")
                failures.append(f"equipment[{idx}]")
                item.purpose = fallback_purpose(niche)

        if calls == 0:
            return StageOutcome.ok(enriched, SKIPPED)
        if failures:
            return StageOutcome.degrade(enriched, FALLBACK, f"fallback values used for {', '.join(failures)}")
        return StageOutcome.ok(enriched, MODEL)

    async def _enrich_template(self, template: ContentTemplate, niche: str) -> None:
        prompt = template_enrichment_prompt(niche, template.title, template.structure or template.type)
        content = await self.llm.achat(prompt, temperature=0.7, max_tokens=200)
        data = extract_json_object(content)
        if data is None:
            raise ParseError("Could not parse template enrichment JSON", stage="enrichment")

        if is_missing(template.format):
            candidate = str(data.get("format") or "").strip()
            template.format = candidate if not is_missing(candidate) else (template.structure or DEFAULT_FORMAT)
        if is_missing(template.hook):
            candidate = str(data.get("hook") or "").strip()
            template.hook = candidate if not is_missing(candidate) else DEFAULT_HOOK

    @staticmethod
    def _template_fallback(template: ContentTemplate) -> None:
        if is_missing(template.format):
            template.format = template.structure or DEFAULT_FORMAT
        if is_missing(template.hook):
            template.hook = DEFAULT_HOOK

    async def _enrich_equipment(self, item: EquipmentItem, niche: str) -> None:
        content = await self.llm.achat(equipment_enrichment_prompt(niche, item.item), temperature=0.5, max_tokens=100)
        purpose = str(content or "").strip().strip("\"'").replace('"', "").strip()[:MAX_PURPOSE_LEN].strip()
        if is_missing(purpose):
            raise ParseError("Empty equipment purpose", stage="enrichment")
        item.purpose = purpose
