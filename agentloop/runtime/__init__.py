"""
Runtime plumbing: event wire, cancellation and shared state.
"""

from agentloop.runtime.control import AbortSignal, race_abort
from agentloop.runtime.state import AgentState, ConversationBuffer, History
from agentloop.runtime.wire import Wire

__all__ = ["AbortSignal", "race_abort", "AgentState", "ConversationBuffer", "History", "Wire"]
