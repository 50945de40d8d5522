"""Coerce a parsed model plan into a total ActionPlan with fixed collection sizes."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Sequence, Type, TypeVar

from pydantic import BaseModel, ValidationError

from core import ActionPlan, ContentIdea
from core.plan import (
    EQUIPMENT_PER_PLAN,
    REQUIRED_PLAN_KEYS,
    TEMPLATES_PER_PLAN,
    WEEKS_PER_PLAN,
    CompetitorAnalysis,
    ContentTemplate,
    EquipmentItem,
    EstimatedResults,
    MonetizationMethod,
    SuccessMetrics,
    WeekPlan,
)
from utils.exceptions import PlanValidationError


logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)


def _validate(model: Type[M], value: Any) -> Optional[M]:
    if not isinstance(value, dict):
        return None
    try:
        return model.model_validate(value)
    except ValidationError:
        return None


def _fit(model: Type[M], raw: Any, fallback: Sequence[M], size: int, label: str) -> List[M]:
    """Exactly `size` items: valid raw items first, fallback items for invalid slots and shortfalls."""
    items = list(raw) if isinstance(raw, list) else []
    if len(items) > size:
        logger.info(f"Truncating {label} from {len(items)} to {size}")
    fitted: List[M] = []
    for idx in range(size):
        parsed = _validate(model, items[idx]) if idx < len(items) else None
        if parsed is None:
            logger.debug(f"{label}[{idx}] filled from fallback plan")
            parsed = fallback[idx].model_copy(deep=True)
        fitted.append(parsed)
    return fitted


def _fit_weeks(raw: Any, fallback: Sequence[WeekPlan]) -> List[WeekPlan]:
    weeks = _fit(WeekPlan, raw, fallback, WEEKS_PER_PLAN, "weeklyPlan")
    for week_no, week in enumerate(weeks, 1):
        week.week = week_no
        if not week.tasks:
            week.tasks = [task.model_copy(deep=True) for task in fallback[week_no - 1].tasks]
        for task_no, task in enumerate(week.tasks, 1):
            if not task.id:
                task.id = f"w{week_no}t{task_no}"
    return weeks


def _success_metrics(raw: Any) -> Optional[SuccessMetrics]:
    if not isinstance(raw, dict) or any(not isinstance(raw.get(f"week{idx}"), dict) for idx in range(1, 5)):
        return None
    return _validate(SuccessMetrics, raw)


def missing_required_keys(data: Dict[str, Any]) -> List[str]:
    return [key for key in REQUIRED_PLAN_KEYS if not isinstance(data.get(key), list) or not data.get(key)]


def normalize_plan(data: Dict[str, Any], fallback: ActionPlan) -> ActionPlan:
    """
    Build an ActionPlan from parsed model output.

    Raises PlanValidationError when weeklyPlan or contentTemplates is absent;
    every other gap is filled from the fallback plan.
    """
    missing = missing_required_keys(data)
    if missing:
        raise PlanValidationError(f"Generated plan is missing required keys: {', '.join(missing)}", missing=missing)

    ideas: List[ContentIdea] = []
    for item in data.get("contentIdeas") or []:
        idea = _validate(ContentIdea, item)
        if idea is not None:
            ideas.append(idea)

    keywords = data.get("keywords")
    if not isinstance(keywords, list) or not [k for k in keywords if str(k).strip()]:
        keywords = list(fallback.keywords)

    monetization = None
    if isinstance(data.get("monetizationStrategy"), list):
        monetization = [m for m in (_validate(MonetizationMethod, item) for item in data["monetizationStrategy"]) if m]

    return ActionPlan(
        strategy=str(data.get("strategy") or "").strip() or fallback.strategy,
        timeline=str(data.get("timeline") or "").strip() or fallback.timeline,
        estimated_results=_validate(EstimatedResults, data.get("estimatedResults")) or fallback.estimated_results,
        weekly_plan=_fit_weeks(data.get("weeklyPlan"), fallback.weekly_plan),
        content_templates=_fit(
            ContentTemplate, data.get("contentTemplates"), fallback.content_templates, TEMPLATES_PER_PLAN, "contentTemplates"
        ),
        keywords=keywords,
        equipment=_fit(EquipmentItem, data.get("equipment"), fallback.equipment, EQUIPMENT_PER_PLAN, "equipment"),
        success_metrics=_success_metrics(data.get("successMetrics")) or fallback.success_metrics,
        content_ideas=ideas,
        competitor_analysis=_validate(CompetitorAnalysis, data.get("competitorAnalysis")),
        monetization_strategy=monetization or None,
    )

