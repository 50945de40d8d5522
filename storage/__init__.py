"""
Storage Module
Persisted action plans.
"""
from .plan_store import (
    BasePlanStore,
    InMemoryPlanStore,
    JsonlPlanStore,
    StoredPlan,
    get_plan_store,
)

__all__ = [
    "BasePlanStore",
    "InMemoryPlanStore",
    "JsonlPlanStore",
    "StoredPlan",
    "get_plan_store",
]
