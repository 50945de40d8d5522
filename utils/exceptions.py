"""
Custom Exceptions
Error taxonomy for the action plan service
"""
from typing import List, Optional


class ActionPlanError(Exception):
    """Base exception for the action plan service"""

    def __init__(self, message: str, details: dict = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)

    def __str__(self):
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class ConfigurationError(ActionPlanError):
    """Missing or invalid configuration"""
    pass


class ProviderError(ActionPlanError):
    """Transport, auth or payload failure from one research provider"""

    def __init__(self, message: str, provider: str = None, **kwargs):
        super().__init__(message, kwargs)
        self.provider = provider


class LLMError(ActionPlanError):
    """LLM call failure"""

    def __init__(self, message: str, provider: str = None, **kwargs):
        super().__init__(message, kwargs)
        self.provider = provider


class ParseError(ActionPlanError):
    """Malformed or truncated structured model output"""

    def __init__(self, message: str, stage: str = None, **kwargs):
        super().__init__(message, kwargs)
        self.stage = stage


class PlanValidationError(ActionPlanError):
    """Generated plan is missing required keys"""

    def __init__(self, message: str, missing: Optional[List[str]] = None, **kwargs):
        super().__init__(message, kwargs)
        self.missing = list(missing or [])


class AuthenticationError(ActionPlanError):
    """Caller is not authenticated"""
    pass


class QuotaExceededError(ActionPlanError):
    """Caller has exhausted the plan allotment of their tier"""

    def __init__(
        self,
        message: str,
        *,
        tier: str,
        used: int,
        limit: int,
        upgrade_url: str,
        benefits: Optional[List[str]] = None,
    ):
        super().__init__(message, {"tier": tier, "used": used, "limit": limit})
        self.tier = tier
        self.used = used
        self.limit = limit
        self.upgrade_url = upgrade_url
        self.benefits = list(benefits or [])


class DuplicateRequestError(ActionPlanError):
    """Same user, channel and topic already in flight"""
    pass


class PipelineTimeoutError(ActionPlanError):
    """Whole pipeline exceeded its wall-clock ceiling"""
    pass


class PersistenceError(ActionPlanError):
    """Plan store write failure"""
    pass
