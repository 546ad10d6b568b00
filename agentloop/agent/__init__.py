"""
Agent module - turn executors, the driver loop and the Agent wrapper.
"""

from agentloop.agent.agent import Agent
from agentloop.agent.default import DefaultExecutor
from agentloop.agent.executor import TurnContext, TurnExecutor
from agentloop.agent.output import AgentOutput
from agentloop.agent.react import ReActExecutor
from agentloop.agent.result import AgentRunResult
from agentloop.agent.turn import Complete, Continue, Fatal, TurnError, TurnResult

__all__ = [
    "Agent",
    "AgentOutput",
    "AgentRunResult",
    "TurnExecutor",
    "TurnContext",
    "DefaultExecutor",
    "ReActExecutor",
    "TurnResult",
    "Complete",
    "Continue",
    "TurnError",
    "Fatal",
]
