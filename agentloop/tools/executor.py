"""
Tool executor.

Resolves each ToolCall against the registry, runs it, and folds every
failure (unknown tool, bad arguments, tool error) into a ToolCallResult
with success=False. A batch of N calls always yields N results in call
order.
"""

import json
from typing import Any, Iterable

from agentloop.domain import (
    ToolCall,
    ToolCallCompleted,
    ToolCallFailed,
    ToolCallRequested,
    ToolCallResult,
)
from agentloop.exceptions import ToolError
from agentloop.runtime.wire import Wire
from agentloop.tools.base import Tool
from agentloop.tools.registry import ToolRegistry
from agentloop.utils.logging import get_logger

logger = get_logger(__name__)


class ToolExecutor:
    """Runs tool calls sequentially and reports them on the wire."""

    def __init__(
        self,
        tools: ToolRegistry | Iterable[Tool],
        wire: Wire | None = None,
    ):
        """
        Initialize tool executor.

        Args:
            tools: Registry or plain list of tools
            wire: Optional event channel for ToolCall* events
        """
        self.registry = tools if isinstance(tools, ToolRegistry) else ToolRegistry(tools)
        self.wire = wire

    def execute(self, tool_call: ToolCall) -> ToolCallResult:
        """
        Execute a single tool call.

        Args:
            tool_call: Tool call requested by the model

        Returns:
            ToolCallResult: never raises for tool-level failures
        """
        fn_name = tool_call.function.name
        fn_args = tool_call.function.arguments

        self._emit(ToolCallRequested(id=tool_call.id, tool_name=fn_name, arguments=fn_args))

        result = self._resolve_and_run(fn_name, fn_args, tool_call.id)

        if result.success:
            self._emit(
                ToolCallCompleted(id=tool_call.id, tool_name=fn_name, result=result.result)
            )
        else:
            self._emit(
                ToolCallFailed(
                    id=tool_call.id,
                    tool_name=fn_name,
                    error=result.error or "",
                )
            )
        return result

    def execute_batch(self, tool_calls: list[ToolCall]) -> list[ToolCallResult]:
        """
        Execute tool calls one after another, in list order.

        Later calls may depend on side effects of earlier ones, so calls are
        never run concurrently.
        """
        return [self.execute(tc) for tc in tool_calls]

    def _resolve_and_run(self, fn_name: str, fn_args: str, call_id: str) -> ToolCallResult:
        tool = self.registry.get(fn_name)
        if tool is None:
            logger.warning("tool_not_found", tool_name=fn_name, tool_call_id=call_id)
            return ToolCallResult(
                tool_name=fn_name,
                success=False,
                arguments=_try_parse(fn_args),
                result={"error": f"Tool '{fn_name}' not found"},
            )

        try:
            args = json.loads(fn_args)
        except json.JSONDecodeError as e:
            logger.warning(
                "tool_arguments_invalid", tool_name=fn_name, tool_call_id=call_id, error=str(e)
            )
            return ToolCallResult(
                tool_name=fn_name,
                success=False,
                arguments=None,
                result={"error": f"Failed to parse arguments: {e}"},
            )

        try:
            logger.debug("executing_tool", tool_name=fn_name, tool_call_id=call_id)
            output = tool.run(args)
        except ToolError as e:
            logger.warning("tool_execution_failed", tool_name=fn_name, error=str(e))
            return ToolCallResult(
                tool_name=fn_name,
                success=False,
                arguments=args,
                result={"error": str(e)},
            )
        except Exception as e:
            logger.error(
                "tool_execution_exception",
                tool_name=fn_name,
                error=str(e),
                exc_info=True,
            )
            return ToolCallResult(
                tool_name=fn_name,
                success=False,
                arguments=args,
                result={"error": f"Tool execution failed: {e}"},
            )

        logger.debug("tool_execution_completed", tool_name=fn_name, tool_call_id=call_id)
        return ToolCallResult(tool_name=fn_name, success=True, arguments=args, result=output)

    def _emit(self, event: Any) -> None:
        if self.wire is not None:
            self.wire.emit(event)


def _try_parse(raw: str) -> Any:
    try:
        return json.loads(raw)
    except (json.JSONDecodeError, TypeError):
        return None


__all__ = ["ToolExecutor"]
