"""
DefaultExecutor - plain tool-calling loop.

Only the last non-empty text and the tool results survive into the final
output; interim reasoning is not collected.
"""

from agentloop.agent.executor import TurnExecutor


class DefaultExecutor(TurnExecutor):
    """Turn executor with the stock output shaping."""


__all__ = ["DefaultExecutor"]
