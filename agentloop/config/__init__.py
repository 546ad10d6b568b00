"""
Configuration for agentloop.

- settings: process-wide values from AGENTLOOP_* environment variables
- ExecutionConfig / AgentConfig: explicit per-run configuration
"""

from agentloop.config.settings import AgentLoopSettings, settings
from agentloop.config.execution import AgentConfig, ExecutionConfig

__all__ = ["AgentLoopSettings", "settings", "AgentConfig", "ExecutionConfig"]
