"""Action plan HTTP API: generation, progress polling, cancellation and history."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, Optional

from fastapi import Body, FastAPI, Query, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from core import GenerateRequest
from integrations import AuthenticatedUser
from orchestrator.service import new_session_id
from utils.exceptions import (
    ActionPlanError,
    AuthenticationError,
    DuplicateRequestError,
    PipelineTimeoutError,
    QuotaExceededError,
)
from webapp.runtime import get_authenticator, get_progress_store, get_service


logger = logging.getLogger(__name__)

DISCONNECT_POLL_SEC = 0.5

app = FastAPI(title="Channel Action Plan API", version="1.0")
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _error(status_code: int, error: str, **extra: Any) -> JSONResponse:
    payload: Dict[str, Any] = {"error": error}
    payload.update(extra)
    return JSONResponse(payload, status_code=status_code)


def _authenticate(request: Request) -> AuthenticatedUser:
    return get_authenticator().authenticate(request.headers)


async def _cancel_on_disconnect(request: Request, session_id: str) -> None:
    while True:
        if await request.is_disconnected():
            logger.info(f"Client disconnected, cancelling session {session_id}")
            get_service().cancel(session_id)
            return
        await asyncio.sleep(DISCONNECT_POLL_SEC)


@app.get("/health")
async def health() -> Dict[str, str]:
    return {"status": "ok"}


@app.post("/api/trending/action-plan")
async def create_action_plan(request: Request, payload: Optional[Dict[str, Any]] = Body(default=None)) -> Response:
    try:
        user = _authenticate(request)
    except AuthenticationError as exc:
        return _error(401, exc.message)

    try:
        body = GenerateRequest.model_validate(payload or {})
    except ValidationError as exc:
        return _error(400, "Invalid request body", details=str(exc))
    if not body.channel_name or not body.topic:
        return _error(400, "Channel name and topic are required")

    session_id = body.session_id or new_session_id()
    watcher = asyncio.create_task(_cancel_on_disconnect(request, session_id))
    try:
        plan = await get_service().generate(user, body, session_id=session_id)
    except QuotaExceededError as exc:
        return _error(
            403,
            "Plan limit reached",
            message=exc.message,
            showUpgrade=True,
            upgradeUrl=exc.upgrade_url,
            benefits=exc.benefits,
        )
    except DuplicateRequestError as exc:
        return _error(409, exc.message)
    except PipelineTimeoutError as exc:
        return _error(504, exc.message, details=exc.details)
    except ActionPlanError as exc:
        logger.error(f"Action plan request failed: {exc}", exc_info=True)
        return _error(500, "Failed to generate action plan", details=exc.message)
    except Exception as exc:
        logger.exception("Action plan request failed")
        return _error(500, "Failed to generate action plan", details=str(exc))
    finally:
        watcher.cancel()

    if plan is None:
        return Response(status_code=204)
    return JSONResponse(plan.to_public(), headers={"X-Session-Id": session_id})


@app.get("/api/trending/action-plan/progress")
async def get_progress(session_id: Optional[str] = Query(default=None, alias="sessionId")) -> JSONResponse:
    if not str(session_id or "").strip():
        return _error(400, "sessionId is required")
    state = get_progress_store().read(session_id)
    if state is None:
        return _error(404, "Progress not found")
    return JSONResponse(state.public())


@app.post("/api/trending/action-plan/cancel")
async def cancel_action_plan(request: Request, payload: Optional[Dict[str, Any]] = Body(default=None)) -> JSONResponse:
    try:
        user = _authenticate(request)
    except AuthenticationError as exc:
        return _error(401, exc.message)
    session_id = str((payload or {}).get("sessionId") or "").strip()
    if not session_id:
        return _error(400, "sessionId is required")
    cancelled = get_service().cancel(session_id, user)
    return JSONResponse({"sessionId": session_id, "cancelled": cancelled})


@app.get("/api/trending/action-plans")
async def list_action_plans(request: Request, limit: Optional[int] = Query(default=None, ge=1, le=100)) -> JSONResponse:
    try:
        user = _authenticate(request)
    except AuthenticationError as exc:
        return _error(401, exc.message)
    try:
        plans = get_service().list_plans(user, limit=limit)
    except ActionPlanError as exc:
        logger.error(f"Failed to list action plans: {exc}", exc_info=True)
        return _error(500, "Failed to load action plans", details=exc.message)
    return JSONResponse({"plans": [item.to_public() for item in plans]})
