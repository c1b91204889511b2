"""
botagent configuration via pydantic-settings.

Settings are loaded from environment variables prefixed with ``BOTAGENT_``
(and an optional .env file). They only shape the defaults of the ambient
layer: which pattern list the default detector uses, its matching options,
and how logging is rendered. Query functions never read the environment
themselves.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Optional

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class MatcherSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="BOTAGENT_", env_file=".env", extra="ignore"
    )

    # None means the bundled botagent/data/patterns.json
    patterns_path: Optional[str] = None
    ignore_case: bool = False
    # Seconds per search; None disables the limit
    match_timeout: Optional[float] = None

    @field_validator("match_timeout")
    @classmethod
    def _positive_timeout(cls, value: Optional[float]) -> Optional[float]:
        if value is not None and value <= 0:
            raise ValueError("match_timeout must be positive")
        return value


class LoggingSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="BOTAGENT_", env_file=".env", extra="ignore"
    )

    log_level: str = "INFO"
    log_format: str = "console"  # "json" for machine-readable output


class BotAgentSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="BOTAGENT_", env_file=".env", extra="ignore"
    )

    # Sub-configs (composed via model_validator below)
    matcher: Optional[MatcherSettings] = None
    logging: Optional[LoggingSettings] = None

    @model_validator(mode="after")
    def _populate_sub_configs(self) -> "BotAgentSettings":
        if self.matcher is None:
            self.matcher = MatcherSettings()
        if self.logging is None:
            self.logging = LoggingSettings()
        return self


@lru_cache(maxsize=1)
def get_settings() -> BotAgentSettings:
    """Return the process-wide settings, read once on first use."""
    return BotAgentSettings()
