"""Action plan service: quota pre-flight, de-duplication, timeout and cancellation around one pipeline run."""

from __future__ import annotations

import asyncio
import logging
from typing import Callable, List, Optional
from uuid import uuid4

from core import ActionPlan, GenerateRequest, PipelineStage
from integrations import AuthenticatedUser, ChannelSnapshot, PlanQuotaGate, YouTubeChannelSource
from pipeline import PipelineServices
from storage import BasePlanStore, StoredPlan
from utils.exceptions import PipelineTimeoutError, QuotaExceededError
from .inflight import InFlightRegistry, InFlightRun
from .progress import InMemoryProgressStore


logger = logging.getLogger(__name__)


def new_session_id() -> str:
    return f"session_{uuid4().hex}"


class ActionPlanService:
    """
    Entry point shared by the HTTP layer and the CLI.

    generate() returns None when the run was cancelled through cancel();
    a cancellation of the calling task itself (client disconnect) propagates.
    """

    def __init__(
        self,
        *,
        plan_store: BasePlanStore,
        progress: InMemoryProgressStore,
        quota_gate: PlanQuotaGate,
        channel_source: YouTubeChannelSource,
        services_factory: Callable[[], PipelineServices],
        inflight: Optional[InFlightRegistry] = None,
        timeout_sec: float = 300.0,
    ) -> None:
        self.plan_store = plan_store
        self.progress = progress
        self.quota_gate = quota_gate
        self.channel_source = channel_source
        self.services_factory = services_factory
        self.inflight = inflight or InFlightRegistry()
        self.timeout_sec = timeout_sec

    @classmethod
    def from_settings(
        cls,
        settings,
        *,
        plan_store: BasePlanStore,
        progress: InMemoryProgressStore,
    ) -> "ActionPlanService":
        return cls(
            plan_store=plan_store,
            progress=progress,
            quota_gate=PlanQuotaGate(plan_store, settings.quota),
            channel_source=YouTubeChannelSource(
                settings.youtube.api_key,
                recent_videos=settings.youtube.recent_videos,
                timeout=settings.youtube.request_timeout,
            ),
            services_factory=lambda: PipelineServices.from_settings(settings, progress),
            timeout_sec=settings.pipeline.timeout_sec,
        )

    async def generate(
        self,
        user: AuthenticatedUser,
        request: GenerateRequest,
        *,
        session_id: Optional[str] = None,
    ) -> Optional[ActionPlan]:
        session_id = session_id or request.session_id or new_session_id()

        # Quota rejection is the only path that writes FAILED. Runs still in
        # flight count against the limit until they are stored or abandoned.
        try:
            run = self.inflight.claim(
                request.dedup_key(user.user_id),
                session_id,
                user_id=user.user_id,
                admit=lambda pending: self.quota_gate.enforce(user, pending),
            )
        except QuotaExceededError as exc:
            self.progress.update(session_id, PipelineStage.FAILED, exc.message)
            raise

        try:
            plan = await self._run_with_ceiling(run, request, session_id)
            if plan is not None:
                self._persist(user, request, plan, session_id)
        finally:
            self.inflight.release(run)
        return plan

    async def _run_with_ceiling(
        self,
        run: InFlightRun,
        request: GenerateRequest,
        session_id: str,
    ) -> Optional[ActionPlan]:
        self.progress.update(session_id, PipelineStage.INITIALIZING, "Fetching channel data", 0)
        task = asyncio.create_task(self._execute(request, session_id))
        self.inflight.attach(run, task)
        try:
            return await asyncio.wait_for(task, timeout=self.timeout_sec)
        except asyncio.TimeoutError as exc:
            self.progress.discard(session_id)
            logger.error(f"Action plan for session {session_id} exceeded {self.timeout_sec}s")
            raise PipelineTimeoutError(
                "Action plan generation timed out",
                {"sessionId": session_id, "timeoutSec": self.timeout_sec},
            ) from exc
        except asyncio.CancelledError:
            self.progress.discard(session_id)
            current = asyncio.current_task()
            if run.cancel_requested and (current is None or not current.cancelling()):
                logger.info(f"Action plan for session {session_id} cancelled")
                return None
            raise

    async def _execute(self, request: GenerateRequest, session_id: str) -> ActionPlan:
        snapshot: ChannelSnapshot = await self.channel_source.fetch(
            request.channel_name or "",
            request.channel_id,
            request.channel_bio,
            topic=request.topic or "",
        )
        services = self.services_factory()
        try:
            generator = services.build_generator()
            return await generator.generate(
                request,
                channel=snapshot.profile,
                session_id=session_id,
                channel_analytics=snapshot.analytics,
            )
        finally:
            await services.aclose()

    def _persist(self, user: AuthenticatedUser, request: GenerateRequest, plan: ActionPlan, session_id: str) -> None:
        try:
            self.plan_store.save_plan(
                user_id=user.user_id,
                channel_name=request.channel_name or plan.channel or "",
                topic=request.topic or plan.topic or "",
                plan=plan.to_public(),
                session_id=session_id,
            )
        except Exception as exc:
            logger.error(f"Failed to store action plan for user {user.user_id}: {exc}", exc_info=True)

    def cancel(self, session_id: str, user: Optional[AuthenticatedUser] = None) -> bool:
        """Cancel a running session; with a user, only that user's own run."""
        return self.inflight.cancel(session_id, user.user_id if user is not None else None)

    def list_plans(self, user: AuthenticatedUser, limit: Optional[int] = None) -> List[StoredPlan]:
        return self.plan_store.list_for_user(user.user_id, limit=limit)
