from __future__ import annotations

import pytest

from config import QuotaSettings
from integrations import AuthenticatedUser, HeaderAuthenticator, PlanQuotaGate
from storage import InMemoryPlanStore
from utils.exceptions import AuthenticationError, QuotaExceededError


def _gate(store: InMemoryPlanStore) -> PlanQuotaGate:
    return PlanQuotaGate(store, QuotaSettings(upgrade_url="/pricing", free_limit=1, creator_limit=15, pro_limit=-1))


def _store_plans(store: InMemoryPlanStore, user_id: str, count: int) -> None:
    for idx in range(count):
        store.save_plan(user_id=user_id, channel_name="CodeLab", topic=f"t{idx}", plan={})


def test_free_tier_allows_exactly_one_plan():
    store = InMemoryPlanStore()
    gate = _gate(store)
    user = AuthenticatedUser("u1", "free")

    assert gate.enforce(user).remaining == 1
    _store_plans(store, "u1", 1)

    with pytest.raises(QuotaExceededError) as excinfo:
        gate.enforce(user)
    error = excinfo.value
    assert (error.tier, error.used, error.limit) == ("free", 1, 1)
    assert error.upgrade_url == "/pricing"
    assert error.benefits


def test_creator_tier_limit_and_pro_unlimited():
    store = InMemoryPlanStore()
    gate = _gate(store)
    _store_plans(store, "c1", 15)
    _store_plans(store, "p1", 40)

    assert gate.check(AuthenticatedUser("c1", "creator")).allowed is False
    decision = gate.check(AuthenticatedUser("p1", "pro"))
    assert decision.allowed is True
    assert decision.remaining == -1


def test_unknown_tier_is_treated_as_free():
    store = InMemoryPlanStore()
    _store_plans(store, "u1", 1)
    assert _gate(store).check(AuthenticatedUser("u1", "platinum")).allowed is False


def test_authenticator_reads_header_and_maps_tier():
    auth = HeaderAuthenticator({"creator-user": "Creator"})

    assert auth.authenticate({"X-User-Id": "creator-user"}) == AuthenticatedUser("creator-user", "creator")
    assert auth.authenticate({"X-User-Id": " someone "}).tier == "free"
    with pytest.raises(AuthenticationError):
        auth.authenticate({})
    with pytest.raises(AuthenticationError):
        auth.authenticate({"X-User-Id": "   "})


def test_runs_in_flight_count_against_the_limit():
    gate = _gate(InMemoryPlanStore())
    user = AuthenticatedUser("u1", "free")

    assert gate.check(user).allowed is True
    with pytest.raises(QuotaExceededError) as excinfo:
        gate.enforce(user, pending=1)
    assert excinfo.value.used == 1
    assert gate.check(AuthenticatedUser("p1", "pro"), pending=50).allowed is True
