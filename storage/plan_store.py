"""
Plan Store
Stored action plans per user, used for history listing and tier quota counts.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime, timezone
import json
import logging
from pathlib import Path
from threading import Lock
from typing import Any, Dict, List, Optional
from uuid import uuid4

from pydantic import BaseModel, Field

from utils.exceptions import PersistenceError


logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _new_plan_id() -> str:
    return f"plan_{_utcnow().strftime('%Y%m%d_%H%M%S')}_{uuid4().hex[:8]}"


class StoredPlan(BaseModel):
    id: str = Field(default_factory=_new_plan_id)
    user_id: str
    channel_name: str
    topic: str
    plan: Dict[str, Any]
    session_id: Optional[str] = None
    created_at: datetime = Field(default_factory=_utcnow)

    def to_public(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "channelName": self.channel_name,
            "topic": self.topic,
            "plan": self.plan,
            "sessionId": self.session_id,
            "createdAt": self.created_at.isoformat(),
        }


class BasePlanStore(ABC):
    """Plan store interface"""

    @abstractmethod
    def insert(self, record: StoredPlan) -> StoredPlan:
        pass

    @abstractmethod
    def list_for_user(self, user_id: str, limit: Optional[int] = None) -> List[StoredPlan]:
        """Plans of one user, newest first."""
        pass

    def count_for_user(self, user_id: str) -> int:
        return len(self.list_for_user(user_id))

    def save_plan(
        self,
        *,
        user_id: str,
        channel_name: str,
        topic: str,
        plan: Dict[str, Any],
        session_id: Optional[str] = None,
    ) -> StoredPlan:
        record = StoredPlan(
            user_id=user_id,
            channel_name=channel_name,
            topic=topic,
            plan=plan,
            session_id=session_id,
        )
        return self.insert(record)


def _newest_first(records: List[StoredPlan], limit: Optional[int]) -> List[StoredPlan]:
    ordered = sorted(records, key=lambda item: item.created_at, reverse=True)
    if limit is not None and limit >= 0:
        ordered = ordered[:limit]
    return [item.model_copy(deep=True) for item in ordered]


class InMemoryPlanStore(BasePlanStore):
    """Thread-safe in-process plan store."""

    def __init__(self) -> None:
        self._plans: Dict[str, List[StoredPlan]] = {}
        self._lock = Lock()

    def insert(self, record: StoredPlan) -> StoredPlan:
        with self._lock:
            self._plans.setdefault(record.user_id, []).append(record.model_copy(deep=True))
        return record

    def list_for_user(self, user_id: str, limit: Optional[int] = None) -> List[StoredPlan]:
        with self._lock:
            records = list(self._plans.get(user_id, []))
        return _newest_first(records, limit)

    def count_for_user(self, user_id: str) -> int:
        with self._lock:
            return len(self._plans.get(user_id, []))


class JsonlPlanStore(BasePlanStore):
    """
    Append-only JSON Lines store.

    One plan per line; unreadable lines are skipped on load.
    """

    def __init__(self, path: str = "./data/action_plans.jsonl"):
        self.path = Path(path)
        self._lock = Lock()

    def insert(self, record: StoredPlan) -> StoredPlan:
        with self._lock:
            try:
                line = record.model_dump_json()
                self.path.parent.mkdir(parents=True, exist_ok=True)
                with open(self.path, "a", encoding="utf-8") as f:
                    f.write(line + "\n")
            except (OSError, ValueError) as exc:
                raise PersistenceError(f"Failed to write plan store {self.path}: {exc}") from exc
        return record

    def _load(self) -> List[StoredPlan]:
        if not self.path.exists():
            return []
        records: List[StoredPlan] = []
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                for number, raw in enumerate(f, start=1):
                    raw = raw.strip()
                    if not raw:
                        continue
                    try:
                        records.append(StoredPlan.model_validate(json.loads(raw)))
                    except ValueError as exc:
                        logger.warning(f"Skipping unreadable plan record at {self.path}:{number}: {exc}")
        except OSError as exc:
            raise PersistenceError(f"Failed to read plan store {self.path}: {exc}") from exc
        return records

    def list_for_user(self, user_id: str, limit: Optional[int] = None) -> List[StoredPlan]:
        with self._lock:
            records = [item for item in self._load() if item.user_id == user_id]
        return _newest_first(records, limit)


def get_plan_store(path: Optional[str] = None) -> BasePlanStore:
    """JSON Lines store when a path is configured, in-memory otherwise."""
    if path:
        return JsonlPlanStore(path)
    return InMemoryPlanStore()
