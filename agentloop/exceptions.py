"""
Exception hierarchy for agentloop.

Tool-level errors are absorbed by the tool executor and turned into failed
ToolCallResults. Executor-level errors propagate to the caller of execute().
"""

from typing import Any
from uuid import UUID


class AgentLoopError(Exception):
    """Base exception for all agentloop errors."""

    pass


# ============================================================================
# Configuration
# ============================================================================


class ConfigError(AgentLoopError):
    """Invalid configuration."""

    pass


# ============================================================================
# Tools
# ============================================================================


class ToolError(AgentLoopError):
    """Base exception for tool failures."""

    pass


class ToolRuntimeError(ToolError):
    """The tool ran and failed."""

    pass


class ToolSerdeError(ToolError):
    """Tool arguments or output could not be (de)serialized."""

    pass


class ToolNotFoundError(ToolError):
    """No registered tool has the requested name."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Tool '{name}' not found")


class DuplicateToolError(ToolError, ConfigError):
    """Two tools were registered under the same name."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Tool '{name}' is already registered")


# ============================================================================
# Memory
# ============================================================================


class MemoryProviderError(AgentLoopError):
    """A memory provider failed to store or recall messages."""

    pass


# ============================================================================
# Executor
# ============================================================================


class ExecutorError(AgentLoopError):
    """Base exception for errors that end an execution run."""

    pass


class LLMError(ExecutorError):
    """The chat interface failed or returned an unusable response."""

    pass


class MaxTurnsExceededError(ExecutorError):
    """The turn budget was exhausted without a final answer."""

    def __init__(self, max_turns: int, partial: Any = None):
        self.max_turns = max_turns
        self.partial = partial
        super().__init__(f"Maximum turns exceeded: {max_turns}")


class FatalTurnError(ExecutorError):
    """A turn reported an unrecoverable failure."""

    def __init__(self, reason: str, turn: int | None = None):
        self.reason = reason
        self.turn = turn
        super().__init__(f"Fatal error in turn {turn}: {reason}")


class AgentOutputError(ExecutorError):
    """The final response could not be parsed into the expected output type."""

    pass


# ============================================================================
# Sessions
# ============================================================================


class SessionError(AgentLoopError):
    """Base exception for session errors."""

    pass


class AgentNotFoundError(SessionError):
    """No agent is registered under the given id."""

    def __init__(self, agent_id: UUID):
        self.agent_id = agent_id
        super().__init__(f"Agent not found: {agent_id}")


class NoTaskSetError(SessionError):
    """The session task queue is empty."""

    def __init__(self, agent_id: UUID):
        self.agent_id = agent_id
        super().__init__(f"No task set for agent: {agent_id}")


__all__ = [
    "AgentLoopError",
    "ConfigError",
    "ToolError",
    "ToolRuntimeError",
    "ToolSerdeError",
    "ToolNotFoundError",
    "DuplicateToolError",
    "MemoryProviderError",
    "ExecutorError",
    "LLMError",
    "MaxTurnsExceededError",
    "FatalTurnError",
    "AgentOutputError",
    "SessionError",
    "AgentNotFoundError",
    "NoTaskSetError",
]
