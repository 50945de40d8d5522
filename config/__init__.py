"""
Configuration Management Module
Environment-driven settings for providers, pipeline and storage
"""
from .settings import (
    Settings,
    LLMSettings,
    SearchSettings,
    PipelineSettings,
    YouTubeSettings,
    StorageSettings,
    QuotaSettings,
    LogSettings,
    get_settings,
    get_llm_settings,
    get_search_settings,
    get_pipeline_settings,
)

__all__ = [
    "Settings",
    "LLMSettings",
    "SearchSettings",
    "PipelineSettings",
    "YouTubeSettings",
    "StorageSettings",
    "QuotaSettings",
    "LogSettings",
    "get_settings",
    "get_llm_settings",
    "get_search_settings",
    "get_pipeline_settings",
]
