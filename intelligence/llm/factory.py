"""
LLM Factory
Build an LLM instance from settings
"""
from typing import Optional
import logging

from utils.exceptions import ConfigurationError
from .base import BaseLLM
from .openai_llm import OpenAILLM
from .anthropic_llm import AnthropicLLM


logger = logging.getLogger(__name__)


DEFAULT_MODELS = {
    "anthropic": "claude-sonnet-4-5-20250929",
    "openai": "gpt-4o-mini",
}


def get_llm(
    provider: Optional[str] = None,
    model: Optional[str] = None,
    settings=None,
    **kwargs,
) -> BaseLLM:
    """
    Create an LLM instance

    Reads LLM_* settings unless overridden.

    Args:
        provider: anthropic or openai
        model: model name (provider default when omitted)
        settings: LLMSettings instance (defaults to the process settings)
        **kwargs: temperature, max_tokens, timeout, api_key, base_url

    Returns:
        BaseLLM instance

    Example:
        llm = get_llm()
        llm = get_llm(provider="openai", model="gpt-4o")
    """
    if settings is None:
        from config import get_llm_settings
        settings = get_llm_settings()

    provider = str(provider or settings.provider or "anthropic").strip().lower()
    model = model or settings.model_name or DEFAULT_MODELS.get(provider)

    api_keys = {
        "anthropic": settings.anthropic_api_key,
        "openai": settings.openai_api_key,
    }
    api_key = kwargs.pop("api_key", None) or api_keys.get(provider)

    for key, value in {
        "temperature": settings.temperature,
        "max_tokens": settings.max_tokens,
        "timeout": settings.timeout,
    }.items():
        kwargs.setdefault(key, value)

    if provider == "anthropic":
        return AnthropicLLM(model=model, api_key=api_key, **kwargs)
    if provider == "openai":
        return OpenAILLM(
            model=model,
            api_key=api_key,
            base_url=kwargs.pop("base_url", None) or settings.openai_base_url,
            **kwargs,
        )
    raise ConfigurationError(f"Unsupported LLM provider: {provider}", {"provider": provider})
