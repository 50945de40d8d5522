"""
Intelligence Module
LLM abstraction used by research and plan generation
"""
from .llm import (
    BaseLLM,
    LLMResponse,
    Message,
    OpenAILLM,
    AnthropicLLM,
    get_llm,
)

__all__ = [
    "BaseLLM",
    "LLMResponse",
    "Message",
    "OpenAILLM",
    "AnthropicLLM",
    "get_llm",
]
