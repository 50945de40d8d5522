from __future__ import annotations

import pytest

from pipeline import build_fallback_plan
from pipeline.normalize import normalize_plan
from utils.exceptions import PlanValidationError
from fakes import plan_payload


def test_fallback_plan_is_complete():
    plan = build_fallback_plan("CodeLab", "Python", "Coding Tutorials")

    assert len(plan.weekly_plan) == 4
    assert all(len(week.tasks) == 5 for week in plan.weekly_plan)
    assert len(plan.content_templates) == 3
    assert all(template.format and template.hook for template in plan.content_templates)
    assert len(plan.equipment) == 5
    assert all(item.purpose for item in plan.equipment)
    assert len(plan.content_ideas) == 5
    assert "Coding Tutorials" in plan.keywords
    assert plan.channel == "CodeLab"


def test_fallback_plan_is_deterministic():
    assert build_fallback_plan("CodeLab", "Python") == build_fallback_plan("CodeLab", "Python")


def test_public_shape_uses_camel_case_keys():
    data = build_fallback_plan("CodeLab", "Python").to_public()
    assert {"weeklyPlan", "contentTemplates", "successMetrics", "estimatedResults"} <= set(data)
    assert "metadata" not in data


def test_normalize_renumbers_weeks_and_fills_task_ids():
    payload = plan_payload(weeks=2)
    payload["weeklyPlan"][1]["week"] = 7
    payload["weeklyPlan"][1]["tasks"] = [{"id": "", "task": "Film intro"}]

    plan = normalize_plan(payload, build_fallback_plan("CodeLab", "Python"))

    assert [week.week for week in plan.weekly_plan] == [1, 2, 3, 4]
    assert plan.weekly_plan[1].tasks[0].id == "w2t1"
    assert plan.weekly_plan[1].tasks[0].priority == "medium"
    assert plan.weekly_plan[2].theme == "Launch & Promotion"


def test_normalize_rejects_missing_weekly_plan():
    payload = plan_payload()
    payload["weeklyPlan"] = []
    with pytest.raises(PlanValidationError) as excinfo:
        normalize_plan(payload, build_fallback_plan("CodeLab", "Python"))
    assert excinfo.value.missing == ["weeklyPlan"]


def test_normalize_replaces_invalid_items_with_fallback_items():
    payload = plan_payload()
    payload["equipment"][0] = {"purpose": "no item name"}
    fallback = build_fallback_plan("CodeLab", "Python")

    plan = normalize_plan(payload, fallback)

    assert plan.equipment[0] == fallback.equipment[0]
    assert plan.equipment[1].item == "Item 2"
