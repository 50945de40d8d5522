"""Shared runtime singletons for the web and CLI entrypoints."""

from __future__ import annotations

from config import get_settings
from integrations import HeaderAuthenticator
from orchestrator.progress import InMemoryProgressStore
from orchestrator.service import ActionPlanService
from storage import BasePlanStore, get_plan_store


_SETTINGS = get_settings()
_PROGRESS = InMemoryProgressStore(ttl_sec=_SETTINGS.pipeline.progress_ttl_sec)
_PLAN_STORE = get_plan_store(_SETTINGS.storage.plans_path)
_AUTHENTICATOR = HeaderAuthenticator(_SETTINGS.quota.tiers)
_SERVICE = ActionPlanService.from_settings(_SETTINGS, plan_store=_PLAN_STORE, progress=_PROGRESS)


def get_progress_store() -> InMemoryProgressStore:
    return _PROGRESS


def get_plan_store_instance() -> BasePlanStore:
    return _PLAN_STORE


def get_authenticator() -> HeaderAuthenticator:
    return _AUTHENTICATOR


def get_service() -> ActionPlanService:
    return _SERVICE
