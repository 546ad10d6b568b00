"""
Global settings from environment variables.
"""

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AgentLoopSettings(BaseSettings):
    """
    Global configuration loaded from environment variables.

    Environment variables should be prefixed with AGENTLOOP_
    Example: AGENTLOOP_DEBUG=true, AGENTLOOP_DEFAULT_MAX_TURNS=20
    """

    model_config = SettingsConfigDict(
        env_prefix="AGENTLOOP_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        protected_namespaces=(),
    )

    # Core settings
    debug: bool = False
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_format: Literal["console", "json"] = "console"

    # Execution defaults
    default_max_turns: int = Field(default=10, ge=1)

    # Event channel capacity (0 = unbounded)
    event_queue_size: int = Field(default=100, ge=0)


# Global settings instance (singleton)
settings = AgentLoopSettings()


__all__ = ["AgentLoopSettings", "settings"]
