from __future__ import annotations

from datetime import datetime, timedelta, timezone

from core import PipelineStage
from orchestrator.progress import InMemoryProgressStore, ProgressReporter


def test_percent_never_decreases_and_only_completed_reports_100():
    store = InMemoryProgressStore()
    store.update("s1", PipelineStage.ANALYZING, "analyzing", 25)
    store.update("s1", PipelineStage.RESEARCH, "late write", 10)
    assert store.read("s1").percent == 25

    store.update("s1", PipelineStage.ENRICHING, "almost", 100)
    assert store.read("s1").percent == 99

    store.update("s1", PipelineStage.COMPLETED, "done", 100)
    assert store.read("s1").public() == {"stage": "COMPLETED", "message": "done", "percent": 100}


def test_terminal_state_ignores_later_updates():
    store = InMemoryProgressStore()
    store.update("s1", PipelineStage.COMPLETED, "done", 100)
    store.update("s1", PipelineStage.ANALYZING, "stale", 15)
    assert store.read("s1").stage == PipelineStage.COMPLETED


def test_failed_keeps_previous_percent():
    store = InMemoryProgressStore()
    store.update("s1", PipelineStage.FAILED, "Plan limit reached")
    state = store.read("s1")
    assert state.stage == PipelineStage.FAILED
    assert state.percent == 0


def test_unknown_and_expired_sessions_read_as_none():
    now = {"t": datetime(2025, 1, 1, tzinfo=timezone.utc)}
    store = InMemoryProgressStore(ttl_sec=60, clock=lambda: now["t"])
    assert store.read("missing") is None

    store.update("s1", PipelineStage.ANALYZING, "x", 15)
    now["t"] += timedelta(seconds=61)
    assert store.read("s1") is None


def test_discard_removes_entry_and_history():
    store = InMemoryProgressStore()
    store.update("s1", PipelineStage.ANALYZING, "x", 15)
    assert store.discard("s1") is True
    assert store.read("s1") is None
    assert store.history("s1") == []


def test_reporter_writes_stage_checkpoints():
    store = InMemoryProgressStore()
    report = ProgressReporter(store, "s1")
    report.enter(PipelineStage.GENERATING, "drafting")
    report.advance(PipelineStage.GENERATING, "drafted")
    assert [state.percent for state in store.history("s1")] == [55, 70]
