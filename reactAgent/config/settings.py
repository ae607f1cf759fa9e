"""Environment-bound configuration objects.

This module provides Pydantic BaseSettings-based configuration loading from .env files.
Every settings group reads its own environment variables, some of them under
several alias names.

Example:
    from reactAgent.config.settings import get_settings

    settings = get_settings()  # Cached singleton
    max_depth = settings.governance.max_depth
    budget = settings.governance.token_budget
"""

from __future__ import annotations

from functools import lru_cache
from typing import Optional

from dotenv import load_dotenv
from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


load_dotenv()


class ModelSettings(BaseSettings):
    """Vendor-neutral model identifier and credentials for the step loop.

    Loads from MODEL_ID / MODEL_CHAT_ID, MODEL_API_KEY, MODEL_BASE_URL.
    """

    model_id: str = Field(
        default="chat-mid",
        validation_alias=AliasChoices("MODEL_ID", "MODEL_CHAT_ID", "MODEL_CHAT"),
    )
    api_key: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("MODEL_API_KEY", "MODEL_CHAT_API_KEY"),
    )
    base_url: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("MODEL_BASE_URL", "MODEL_CHAT_BASE_URL"),
    )
    temperature: float = Field(default=0.2, ge=0.0, le=2.0, alias="MODEL_TEMPERATURE")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
        protected_namespaces=(),
    )


class GovernanceSettings(BaseSettings):
    """Runtime governance and control settings.

    Controls loop and recursion limits:
    - max_steps: step budget of a top-level task (1-500, default: 30)
    - child_max_steps: default step budget of a spawned sub-agent (default: 10)
    - max_depth: deepest allowed recursion level (0 disables spawning, default: 2)
    - token_budget: prompt budget used for transcript trimming
    - max_parallel: worker cap for parallel sub-agents
    - task_timeout / subtask_timeout: wall-clock caps in seconds
    - answer_timeout: how long an Ask waits for the operator (None = forever)
    - auto_approve: verdict of the default confirmation gate
    - plan_first: produce a display plan before the first step
    """

    max_steps: int = Field(default=30, ge=1, le=500, alias="MAX_STEPS")
    child_max_steps: int = Field(default=10, ge=1, le=500, alias="CHILD_MAX_STEPS")
    max_depth: int = Field(default=2, ge=0, le=8, alias="MAX_DEPTH")
    token_budget: int = Field(default=16000, ge=256, alias="TOKEN_BUDGET")
    max_parallel: int = Field(default=4, ge=1, le=32, alias="MAX_PARALLEL")
    task_timeout: float = Field(default=600.0, gt=0, alias="TASK_TIMEOUT")
    subtask_timeout: float = Field(default=180.0, gt=0, alias="SUBTASK_TIMEOUT")
    answer_timeout: Optional[float] = Field(default=None, alias="ANSWER_TIMEOUT")
    auto_approve: bool = Field(default=False, alias="AUTO_APPROVE")
    plan_first: bool = Field(default=True, alias="PLAN_FIRST")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )


class ContextSettings(BaseSettings):
    """Token accounting and observation compression.

    - observation_max_tokens: cap for a single tool observation
    - chars_per_token: rough estimate used everywhere tokens are counted
    - memory_preview_chars: how much of the memory snapshot goes into a prompt
    """

    observation_max_tokens: int = Field(default=1000, ge=16, alias="OBSERVATION_MAX_TOKENS")
    chars_per_token: int = Field(default=4, ge=1, le=8, alias="CHARS_PER_TOKEN")
    memory_preview_chars: int = Field(default=2000, ge=0, alias="MEMORY_PREVIEW_CHARS")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )


class ObservabilitySettings(BaseSettings):
    """Logging configuration.

    - log_level: console level (file handler always logs DEBUG)
    - log_dir: directory for log files, empty disables file logging
    - log_prompt_max_length: truncation applied to logged prompts/replies
    """

    log_level: str = Field(default="WARNING", alias="LOG_LEVEL")
    log_dir: Optional[str] = Field(default="logs", alias="LOG_DIR")
    log_prompt_max_length: int = Field(default=500, ge=100, le=5000, alias="LOG_PROMPT_MAX_LENGTH")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )


class Settings(BaseSettings):
    """Root application settings loaded from .env file.

    Hierarchical structure containing four nested settings groups:
    - model: Model routing and API credentials (ModelSettings)
    - governance: Loop/recursion limits (GovernanceSettings)
    - context: Token accounting (ContextSettings)
    - observability: Logging (ObservabilitySettings)

    Use get_settings() to obtain a cached singleton instance.
    """

    environment: str = Field(default="dev", alias="APP_ENV")
    model: ModelSettings = Field(default_factory=ModelSettings)
    governance: GovernanceSettings = Field(default_factory=GovernanceSettings)
    context: ContextSettings = Field(default_factory=ContextSettings)
    observability: ObservabilitySettings = Field(default_factory=ObservabilitySettings)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        validate_assignment=True,
        case_sensitive=False,
        protected_namespaces=(),
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return a cached singleton Settings instance.

    Returns:
        Settings: Cached application settings instance
    """
    return Settings()
