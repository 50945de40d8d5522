"""
Settings Configuration
Pydantic-based configuration loaded from the environment and an optional .env file
"""
import json
from functools import lru_cache
from pathlib import Path
from typing import Dict, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


class LLMSettings(BaseSettings):
    """LLM provider configuration"""
    provider: str = Field(default="anthropic", description="LLM provider: anthropic, openai")
    model_name: Optional[str] = Field(default=None, description="Model name (provider default when empty)")
    temperature: float = Field(default=0.7, description="Sampling temperature")
    max_tokens: int = Field(default=4096, description="Max generated tokens")
    timeout: float = Field(default=60.0, description="Request timeout (seconds)")

    # API Keys
    anthropic_api_key: Optional[str] = Field(default=None, description="Anthropic API Key")
    openai_api_key: Optional[str] = Field(default=None, description="OpenAI API Key")
    openai_base_url: Optional[str] = Field(default=None, description="OpenAI-compatible base URL")

    class Config:
        env_prefix = "LLM_"


class SearchSettings(BaseSettings):
    """Tiered research provider configuration"""
    perplexity_api_key: Optional[str] = Field(default=None, description="Perplexity API Key")
    perplexity_model: str = Field(default="sonar-pro", description="Perplexity model")
    serpapi_api_key: Optional[str] = Field(default=None, description="SerpAPI Key")
    serpapi_min_interval_sec: float = Field(default=1.0, description="Minimum spacing between SerpAPI calls")
    request_timeout: float = Field(default=30.0, description="HTTP timeout (seconds)")
    enable_claude_fallback: bool = Field(default=True, description="Use the LLM as the last research tier")

    class Config:
        env_prefix = "SEARCH_"


class PipelineSettings(BaseSettings):
    """Plan generation pipeline configuration"""
    timeout_sec: float = Field(default=300.0, description="Hard wall-clock ceiling per request")
    events_timeframe: str = Field(default="12 months", description="Recency window for event discovery")
    generation_max_tokens: int = Field(default=6000, description="Max tokens for the plan generation call")
    progress_ttl_sec: int = Field(default=3600, description="Seconds before a progress entry expires")

    class Config:
        env_prefix = "PIPELINE_"


class YouTubeSettings(BaseSettings):
    """YouTube Data API configuration"""
    api_key: Optional[str] = Field(default=None, description="YouTube Data API v3 key")
    recent_videos: int = Field(default=5, description="Number of recent uploads to fetch")
    request_timeout: float = Field(default=12.0, description="HTTP timeout (seconds)")

    class Config:
        env_prefix = "YOUTUBE_"


class StorageSettings(BaseSettings):
    """Plan store configuration"""
    plans_path: str = Field(default="./data/action_plans.jsonl", description="Append-only plan log")

    class Config:
        env_prefix = "STORAGE_"


class QuotaSettings(BaseSettings):
    """Subscription tier limits (-1 means unlimited)"""
    upgrade_url: str = Field(default="/pricing", description="Upgrade call-to-action target")
    free_limit: int = Field(default=1, description="Stored plans allowed on the free tier")
    creator_limit: int = Field(default=15, description="Stored plans allowed on the creator tier")
    pro_limit: int = Field(default=-1, description="Stored plans allowed on the pro tier")
    tiers: Dict[str, str] = Field(default_factory=dict, description="user id -> tier mapping")

    class Config:
        env_prefix = "QUOTA_"

    @field_validator("tiers", mode="before")
    @classmethod
    def _parse_tiers(cls, value):
        if isinstance(value, str):
            text = value.strip()
            return json.loads(text) if text else {}
        return value or {}

    def limit_for(self, tier: str) -> int:
        limits = {
            "free": self.free_limit,
            "creator": self.creator_limit,
            "pro": self.pro_limit,
        }
        return limits.get(str(tier or "free").strip().lower(), self.free_limit)


class LogSettings(BaseSettings):
    """Logging configuration"""
    level: str = Field(default="INFO", description="Log level")
    file: Optional[str] = Field(default=None, description="Log file name under logs/")
    rich: bool = Field(default=True, description="Use Rich console handler")

    class Config:
        env_prefix = "LOG_"


class Settings(BaseSettings):
    """Root settings aggregating every sub-configuration"""

    llm: LLMSettings = Field(default_factory=LLMSettings)
    search: SearchSettings = Field(default_factory=SearchSettings)
    pipeline: PipelineSettings = Field(default_factory=PipelineSettings)
    youtube: YouTubeSettings = Field(default_factory=YouTubeSettings)
    storage: StorageSettings = Field(default_factory=StorageSettings)
    quota: QuotaSettings = Field(default_factory=QuotaSettings)
    log: LogSettings = Field(default_factory=LogSettings)

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"

    @classmethod
    def load_from_env_file(cls, env_path: Optional[Path] = None) -> "Settings":
        """Load configuration after applying the given .env file"""
        if env_path is None:
            env_path = Path(__file__).parent / ".env"

        if env_path.exists():
            from dotenv import load_dotenv
            load_dotenv(env_path)

        return cls(
            llm=LLMSettings(),
            search=SearchSettings(),
            pipeline=PipelineSettings(),
            youtube=YouTubeSettings(),
            storage=StorageSettings(),
            quota=QuotaSettings(),
            log=LogSettings(),
        )


@lru_cache()
def get_settings() -> Settings:
    """Process-wide settings singleton"""
    return Settings.load_from_env_file()


def get_llm_settings() -> LLMSettings:
    return get_settings().llm


def get_search_settings() -> SearchSettings:
    return get_settings().search


def get_pipeline_settings() -> PipelineSettings:
    return get_settings().pipeline
