from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from storage import InMemoryPlanStore, JsonlPlanStore, StoredPlan, get_plan_store
from utils.exceptions import PersistenceError


def _record(user_id: str, topic: str, minutes: int) -> StoredPlan:
    return StoredPlan(
        user_id=user_id,
        channel_name="CodeLab",
        topic=topic,
        plan={"strategy": topic},
        created_at=datetime(2025, 1, 1, tzinfo=timezone.utc) + timedelta(minutes=minutes),
    )


@pytest.mark.parametrize("factory", [InMemoryPlanStore, None])
def test_lists_newest_first_per_user(tmp_path, factory):
    store = factory() if factory else JsonlPlanStore(str(tmp_path / "plans.jsonl"))
    store.insert(_record("u1", "old", 0))
    store.insert(_record("u1", "new", 10))
    store.insert(_record("u2", "other", 5))

    plans = store.list_for_user("u1")

    assert [item.topic for item in plans] == ["new", "old"]
    assert store.count_for_user("u1") == 2
    assert store.count_for_user("nobody") == 0
    assert [item.topic for item in store.list_for_user("u1", limit=1)] == ["new"]


def test_jsonl_store_survives_reopen_and_skips_bad_lines(tmp_path):
    path = tmp_path / "plans.jsonl"
    JsonlPlanStore(str(path)).save_plan(user_id="u1", channel_name="CodeLab", topic="Python", plan={"a": 1})
    with open(path, "a", encoding="utf-8") as f:
        f.write("{not json\n")

    reopened = JsonlPlanStore(str(path))
    plans = reopened.list_for_user("u1")

    assert len(plans) == 1
    assert plans[0].plan == {"a": 1}
    assert plans[0].to_public()["channelName"] == "CodeLab"


def test_jsonl_write_failure_raises_persistence_error(tmp_path):
    blocker = tmp_path / "file"
    blocker.write_text("x", encoding="utf-8")
    store = JsonlPlanStore(str(blocker / "plans.jsonl"))

    with pytest.raises(PersistenceError):
        store.insert(_record("u1", "t", 0))


def test_get_plan_store_selects_backend(tmp_path):
    assert isinstance(get_plan_store(None), InMemoryPlanStore)
    assert isinstance(get_plan_store(str(tmp_path / "p.jsonl")), JsonlPlanStore)


def test_jsonl_unserialisable_plan_raises_persistence_error(tmp_path):
    path = tmp_path / "plans.jsonl"
    store = JsonlPlanStore(str(path))
    record = StoredPlan(user_id="u1", channel_name="CodeLab", topic="t", plan={"strategy": "Rocket \ud83d"})

    with pytest.raises(PersistenceError):
        store.insert(record)
    assert store.count_for_user("u1") == 0
