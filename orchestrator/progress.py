"""In-memory progress channel polled by clients during plan generation."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from threading import Lock
from typing import Callable, Dict, List, Optional, Tuple

from core import PipelineStage, ProgressState


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# Entry and exit percent for each stage. Stages may jump within their band.
STAGE_CHECKPOINTS: Dict[PipelineStage, Tuple[int, int]] = {
    PipelineStage.INITIALIZING: (0, 0),
    PipelineStage.ANALYZING: (15, 25),
    PipelineStage.RESEARCH: (35, 45),
    PipelineStage.GENERATING: (55, 70),
    PipelineStage.VALIDATING: (80, 80),
    PipelineStage.ENRICHING: (90, 90),
    PipelineStage.COMPLETED: (100, 100),
}

TERMINAL_STAGES = {PipelineStage.COMPLETED, PipelineStage.FAILED}


class InMemoryProgressStore:
    """
    Thread-safe progress snapshots keyed by session id.

    Percent never decreases within a session, and only COMPLETED may report
    100. Entries expire ttl_sec after their last write; expired and unknown
    ids read as None.
    """

    def __init__(self, ttl_sec: int = 3600, *, clock: Callable[[], datetime] = _utcnow) -> None:
        self._ttl = timedelta(seconds=max(0, int(ttl_sec)))
        self._clock = clock
        self._states: Dict[str, ProgressState] = {}
        self._history: Dict[str, List[ProgressState]] = {}
        self._lock = Lock()

    def update(
        self,
        session_id: str,
        stage: PipelineStage,
        message: str = "",
        percent: Optional[int] = None,
    ) -> Optional[ProgressState]:
        key = str(session_id or "").strip()
        if not key:
            return None
        if percent is None:
            percent = STAGE_CHECKPOINTS.get(stage, (0, 0))[0]

        with self._lock:
            self._purge_expired()
            current = self._states.get(key)
            if current is not None and current.stage in TERMINAL_STAGES:
                return current.model_copy(deep=True)

            previous = current.percent if current is not None else 0
            if stage == PipelineStage.FAILED:
                value = previous
            else:
                value = max(0, min(100, int(percent)))
                if stage != PipelineStage.COMPLETED:
                    value = min(value, 99)
                value = max(previous, value)

            state = ProgressState(
                session_id=key,
                stage=stage,
                message=str(message or "").strip(),
                percent=value,
                updated_at=self._clock(),
            )
            self._states[key] = state
            self._history.setdefault(key, []).append(state)
            return state.model_copy(deep=True)

    def read(self, session_id: str) -> Optional[ProgressState]:
        key = str(session_id or "").strip()
        with self._lock:
            self._purge_expired()
            state = self._states.get(key)
            return state.model_copy(deep=True) if state else None

    def history(self, session_id: str) -> List[ProgressState]:
        key = str(session_id or "").strip()
        with self._lock:
            return [item.model_copy(deep=True) for item in self._history.get(key, [])]

    def discard(self, session_id: str) -> bool:
        key = str(session_id or "").strip()
        with self._lock:
            self._history.pop(key, None)
            return self._states.pop(key, None) is not None

    def _purge_expired(self) -> None:
        now = self._clock()
        expired = [key for key, state in self._states.items() if now - state.updated_at > self._ttl]
        for key in expired:
            self._states.pop(key, None)
            self._history.pop(key, None)


class ProgressReporter:
    """Writes checkpoints for one session; handed to the pipeline by the service."""

    def __init__(self, store: InMemoryProgressStore, session_id: str) -> None:
        self._store = store
        self.session_id = session_id

    def enter(self, stage: PipelineStage, message: str) -> None:
        self._store.update(self.session_id, stage, message, STAGE_CHECKPOINTS[stage][0])

    def advance(self, stage: PipelineStage, message: str) -> None:
        self._store.update(self.session_id, stage, message, STAGE_CHECKPOINTS[stage][1])
