"""Registry of running generation tasks, keyed for de-duplication and cancellation."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from threading import Lock
from typing import Callable, Dict, Optional

from utils.exceptions import DuplicateRequestError


@dataclass
class InFlightRun:
    dedup_key: str
    session_id: str
    user_id: str = ""
    task: Optional[asyncio.Task] = None
    cancel_requested: bool = False


class InFlightRegistry:
    """Tracks one run per (user, channel, topic) key and its session id."""

    def __init__(self) -> None:
        self._by_key: Dict[str, InFlightRun] = {}
        self._by_session: Dict[str, InFlightRun] = {}
        self._lock = Lock()

    def claim(
        self,
        dedup_key: str,
        session_id: str,
        *,
        user_id: str = "",
        admit: Optional[Callable[[int], object]] = None,
    ) -> InFlightRun:
        """
        Register a run or raise DuplicateRequestError if the key is already running.

        admit, when given, is called under the registry lock with the number of
        runs the user already has in flight; an exception it raises rejects the
        claim before anything is registered.
        """
        with self._lock:
            if admit is not None:
                admit(self._count_for_user(user_id))
            if dedup_key in self._by_key:
                raise DuplicateRequestError(
                    "An action plan for this channel and topic is already being generated",
                    {"sessionId": self._by_key[dedup_key].session_id},
                )
            run = InFlightRun(dedup_key=dedup_key, session_id=session_id, user_id=user_id)
            self._by_key[dedup_key] = run
            self._by_session[session_id] = run
            return run

    def attach(self, run: InFlightRun, task: asyncio.Task) -> None:
        with self._lock:
            run.task = task

    def release(self, run: InFlightRun) -> None:
        with self._lock:
            if self._by_key.get(run.dedup_key) is run:
                self._by_key.pop(run.dedup_key, None)
            if self._by_session.get(run.session_id) is run:
                self._by_session.pop(run.session_id, None)

    def cancel(self, session_id: str, user_id: Optional[str] = None) -> bool:
        """
        Cancel the task running under session_id.

        Returns False when none is running, or when user_id is given and the
        run belongs to someone else.
        """
        with self._lock:
            run = self._by_session.get(str(session_id or "").strip())
            if run is None:
                return False
            if user_id is not None and run.user_id != user_id:
                return False
            run.cancel_requested = True
            task = run.task
        if task is not None and not task.done():
            task.cancel()
        return True

    def is_running(self, dedup_key: str) -> bool:
        with self._lock:
            return dedup_key in self._by_key

    def count_for_user(self, user_id: str) -> int:
        with self._lock:
            return self._count_for_user(user_id)

    def _count_for_user(self, user_id: str) -> int:
        return sum(1 for run in self._by_key.values() if run.user_id == user_id)
