"""Tiered research providers and the search orchestrator."""

from .base import BaseSearchProvider
from .claude_search import ClaudeSearchProvider
from .orchestrator import SearchOrchestrator
from .perplexity import PerplexitySearchProvider
from .serpapi import SerpApiSearchProvider

__all__ = [
    "BaseSearchProvider",
    "ClaudeSearchProvider",
    "PerplexitySearchProvider",
    "SearchOrchestrator",
    "SerpApiSearchProvider",
]
