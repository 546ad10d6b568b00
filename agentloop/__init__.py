"""
agentloop - agent orchestration toolkit

Top-level exports for easy access to core functionality.
"""

# Agents and executors
from agentloop.agent import (
    Agent,
    AgentOutput,
    AgentRunResult,
    DefaultExecutor,
    ReActExecutor,
    TurnExecutor,
)

# Config
from agentloop.config import AgentConfig, ExecutionConfig, settings

# Domain models
from agentloop.domain import (
    ChatMessage,
    ChatRole,
    Event,
    FunctionCall,
    StructuredOutputFormat,
    Task,
    ToolCall,
    ToolCallResult,
    parse_event,
)

# Errors
from agentloop.exceptions import (
    AgentLoopError,
    LLMError,
    MaxTurnsExceededError,
    ToolError,
)

# Providers
from agentloop.llm import ChatResponse, LLMProvider
from agentloop.memory import MemoryProvider, SlidingWindowMemory, TrimStrategy

# Runtime
from agentloop.runtime import AbortSignal, Wire
from agentloop.sessions import Session, SessionManager
from agentloop.tools import FunctionTool, Tool, ToolRegistry, tool

__version__ = "0.1.0"

__all__ = [
    # Agent
    "Agent",
    "AgentOutput",
    "AgentRunResult",
    "TurnExecutor",
    "DefaultExecutor",
    "ReActExecutor",
    # Config
    "settings",
    "AgentConfig",
    "ExecutionConfig",
    # Domain
    "ChatMessage",
    "ChatRole",
    "Event",
    "FunctionCall",
    "StructuredOutputFormat",
    "Task",
    "ToolCall",
    "ToolCallResult",
    "parse_event",
    # Errors
    "AgentLoopError",
    "LLMError",
    "MaxTurnsExceededError",
    "ToolError",
    # Providers
    "ChatResponse",
    "LLMProvider",
    "MemoryProvider",
    "SlidingWindowMemory",
    "TrimStrategy",
    # Tools
    "Tool",
    "FunctionTool",
    "tool",
    "ToolRegistry",
    # Runtime
    "AbortSignal",
    "Wire",
    "Session",
    "SessionManager",
]
