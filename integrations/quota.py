"""Subscription-tier quota gate, checked before any paid provider call."""

from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import List

from storage.plan_store import BasePlanStore
from utils.exceptions import QuotaExceededError
from .auth import AuthenticatedUser


logger = logging.getLogger(__name__)

UNLIMITED = -1

UPGRADE_BENEFITS: List[str] = [
    "Up to 15 action plans per month on Creator",
    "Unlimited action plans on Pro",
    "Real-event research for every plan",
    "Priority generation",
]


@dataclass(frozen=True)
class QuotaDecision:
    allowed: bool
    tier: str
    used: int
    limit: int

    @property
    def remaining(self) -> int:
        if self.limit == UNLIMITED:
            return UNLIMITED
        return max(0, self.limit - self.used)


class PlanQuotaGate:
    """
    Counts stored plans per user against the limit of their tier.

    pending is the number of the user's runs still in flight; each one
    holds a slot until it finishes.
    """

    def __init__(self, plan_store: BasePlanStore, quota_settings):
        self._plans = plan_store
        self._settings = quota_settings

    def check(self, user: AuthenticatedUser, pending: int = 0) -> QuotaDecision:
        limit = int(self._settings.limit_for(user.tier))
        used = self._plans.count_for_user(user.user_id) + max(0, int(pending))
        allowed = limit == UNLIMITED or used < limit
        return QuotaDecision(allowed=allowed, tier=user.tier, used=used, limit=limit)

    def enforce(self, user: AuthenticatedUser, pending: int = 0) -> QuotaDecision:
        decision = self.check(user, pending)
        if not decision.allowed:
            logger.info(f"Quota exceeded for user {user.user_id} on tier {decision.tier} ({decision.used}/{decision.limit})")
            raise QuotaExceededError(
                f"You've reached your {decision.tier} plan limit of {decision.limit} action plan"
                f"{'' if decision.limit == 1 else 's'}. Upgrade to generate more.",
                tier=decision.tier,
                used=decision.used,
                limit=decision.limit,
                upgrade_url=self._settings.upgrade_url,
                benefits=UPGRADE_BENEFITS,
            )
        return decision
