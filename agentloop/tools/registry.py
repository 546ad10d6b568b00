"""
Tool Registry - ordered capability set handed to an executor.

Lookup is first-match-wins: when two tools share a name, the one registered
first is resolved and the later one is shadowed. Pass
`reject_duplicates=True` to refuse such registrations instead.
"""

from __future__ import annotations

from typing import Iterable, Iterator

from agentloop.domain import ToolSchema
from agentloop.exceptions import DuplicateToolError
from agentloop.tools.base import Tool
from agentloop.utils.logging import get_logger

logger = get_logger(__name__)


class ToolRegistry:
    """Ordered collection of tools with name-based resolution."""

    def __init__(
        self,
        tools: Iterable[Tool] | None = None,
        reject_duplicates: bool = False,
    ) -> None:
        self._tools: list[Tool] = []
        self.reject_duplicates = reject_duplicates
        for t in tools or []:
            self.register(t)

    def register(self, tool: Tool) -> None:
        """Append a tool to the registry."""
        if self.get(tool.name) is not None:
            if self.reject_duplicates:
                raise DuplicateToolError(tool.name)
            logger.warning("duplicate_tool_shadowed", tool_name=tool.name)
        self._tools.append(tool)

    def unregister(self, name: str) -> bool:
        """Remove every tool registered under `name`."""
        before = len(self._tools)
        self._tools = [t for t in self._tools if t.name != name]
        return len(self._tools) != before

    def get(self, name: str) -> Tool | None:
        """Return the first tool registered under `name`."""
        for t in self._tools:
            if t.name == name:
                return t
        return None

    def names(self) -> list[str]:
        return [t.name for t in self._tools]

    def schemas(self) -> list[ToolSchema]:
        """Tool definitions for the model, rebuilt on every call."""
        return [t.to_schema() for t in self._tools]

    def __iter__(self) -> Iterator[Tool]:
        return iter(list(self._tools))

    def __len__(self) -> int:
        return len(self._tools)

    def __bool__(self) -> bool:
        return bool(self._tools)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.get(name) is not None


__all__ = ["ToolRegistry"]
