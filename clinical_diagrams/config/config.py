"""
Library configuration with environment-based settings.
All configuration is explicit, validated, and logged at startup.
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Settings loaded from environment variables.

    The model path is disabled by default so that notes never leave the
    process unless a deployment opts in explicitly.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        env_ignore_empty=True,
    )

    # Model path
    llm_enabled: bool = Field(default=False, description="Route complex notes through a language model")
    llm_api_key: str = Field(default="", description="API key for the cloud model providers")
    llm_model: Literal["gpt-4", "claude", "local-llm"] = Field(
        default="gpt-4",
        description="Model family used for the probabilistic path"
    )
    llm_endpoint: str | None = Field(
        default=None,
        description="Override endpoint (base URL for cloud models, generate URL for local models)"
    )
    llm_max_tokens: int = Field(default=1000, ge=1, description="Max tokens per response")
    llm_temperature: float = Field(default=0.3, ge=0.0, le=2.0, description="Model temperature")
    llm_fallback_to_rules: bool = Field(
        default=True,
        description="Fall back to the rule-based result when the model path fails"
    )
    llm_timeout_seconds: float = Field(
        default=15.0,
        gt=0,
        description="Upper bound for a single model call"
    )

    # Concrete model identifiers per provider family
    openai_model_name: str = Field(default="gpt-4", description="OpenAI chat completion model")
    anthropic_model_name: str = Field(
        default="claude-3-sonnet-20240229",
        description="Anthropic messages model"
    )
    local_model_name: str = Field(default="llama2", description="Model served by the local generate endpoint")
    local_endpoint: str = Field(
        default="http://localhost:11434/api/generate",
        description="Default local generate endpoint"
    )

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: Literal["json", "console"] = Field(
        default="console",
        description="Log output format"
    )

    def get_safe_config_dict(self) -> dict:
        """Return configuration dict with secrets redacted for logging."""
        config = self.model_dump()
        if config.get("llm_api_key"):
            config["llm_api_key"] = "***REDACTED***"
        return config


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings.

    Settings are loaded once and cached for the process lifetime.
    Tests call ``get_settings.cache_clear()`` after patching the environment.
    """
    return Settings()
