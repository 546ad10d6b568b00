"""
Tool contract, function tools, registry and executor.
"""

from agentloop.tools.base import Tool
from agentloop.tools.decorator import tool
from agentloop.tools.executor import ToolExecutor
from agentloop.tools.local import FunctionTool
from agentloop.tools.registry import ToolRegistry

__all__ = ["Tool", "FunctionTool", "tool", "ToolRegistry", "ToolExecutor"]
