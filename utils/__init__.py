"""
Utils Module
Logging, error taxonomy and JSON recovery helpers
"""
from .logger import setup_logger, get_logger, configure_from_settings
from .exceptions import (
    ActionPlanError,
    AuthenticationError,
    ConfigurationError,
    DuplicateRequestError,
    LLMError,
    ParseError,
    PersistenceError,
    PipelineTimeoutError,
    PlanValidationError,
    ProviderError,
    QuotaExceededError,
)
from .json_extract import extract_json_array, extract_json_object, strip_surrogates

__all__ = [
    "setup_logger",
    "get_logger",
    "configure_from_settings",
    "ActionPlanError",
    "AuthenticationError",
    "ConfigurationError",
    "DuplicateRequestError",
    "LLMError",
    "ParseError",
    "PersistenceError",
    "PipelineTimeoutError",
    "PlanValidationError",
    "ProviderError",
    "QuotaExceededError",
    "extract_json_array",
    "extract_json_object",
    "strip_surrogates",
]
