"""
TurnExecutor - the turn state machine and the loop that drives it.

One turn:
1. Assemble context (memory recall or in-memory history), making sure a
   system message comes first
2. Call the model, with tool definitions when tools are available
3. No tool calls: record the answer and return Complete
4. Tool calls: record the ToolUse message, run each call in order, record
   the ToolResult message, accumulate results, return Continue

The loop (execute) runs turns until one completes or max_turns is reached.
LLM failures propagate as LLMError; there are no automatic retries.
"""

import asyncio
import json
from abc import ABC
from dataclasses import dataclass, field

from pydantic import ValidationError

from agentloop.agent.output import AgentOutput
from agentloop.agent.turn import Complete, Continue, Fatal, TurnError, TurnResult
from agentloop.config import AgentConfig, ExecutionConfig
from agentloop.domain import (
    ChatMessage,
    ChatRole,
    FunctionCall,
    Task,
    ToolCall,
    ToolCallResult,
    TurnCompleted,
    TurnStarted,
)
from agentloop.exceptions import (
    FatalTurnError,
    LLMError,
    MaxTurnsExceededError,
    MemoryProviderError,
)
from agentloop.llm import ChatResponse, LLMProvider
from agentloop.memory import MemoryProvider, SharedMemory
from agentloop.runtime import AbortSignal, AgentState, ConversationBuffer, Wire, race_abort
from agentloop.tools import Tool, ToolExecutor, ToolRegistry
from agentloop.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass
class TurnContext:
    """Everything a turn needs, passed explicitly on every call."""

    llm: LLMProvider
    agent_config: AgentConfig
    config: ExecutionConfig
    tools: ToolRegistry
    history: ConversationBuffer
    state: AgentState
    memory: SharedMemory | None = None
    wire: Wire | None = None
    abort_signal: AbortSignal | None = None
    turn: int = 0
    tool_executor: ToolExecutor = field(init=False)

    def __post_init__(self):
        self.tool_executor = ToolExecutor(self.tools, wire=self.wire)


class TurnExecutor(ABC):
    """
    Base executor.

    Subclasses customize how interim and final outputs are shaped by
    overriding build_partial() and build_final(); the state machine itself
    is shared.
    """

    def __init__(self, config: ExecutionConfig | None = None):
        self.config = config or ExecutionConfig()

    # ------------------------------------------------------------------
    # Driver
    # ------------------------------------------------------------------

    async def execute(
        self,
        llm: LLMProvider,
        task: Task,
        agent_config: AgentConfig,
        *,
        tools: ToolRegistry | list[Tool] | None = None,
        memory: SharedMemory | MemoryProvider | None = None,
        state: AgentState | None = None,
        wire: Wire | None = None,
        history: list[ChatMessage] | None = None,
        abort_signal: AbortSignal | None = None,
    ) -> AgentOutput:
        """
        Run turns until the model answers or the budget is spent.

        Args:
            llm: Chat provider
            task: Task whose prompt starts the run
            agent_config: Agent identity and system prompt
            tools: Tools the model may call
            memory: Optional memory; when set it is the context source
            state: Run-level accumulator, shared with observers
            wire: Event channel for turn and tool events
            history: Prior messages used when no memory is attached
            abort_signal: Cancels the run between turns or during an LLM call

        Returns:
            AgentOutput: final text plus every tool result of the run

        Raises:
            LLMError: the model call failed
            FatalTurnError: a turn was fatal or the run was aborted
            MaxTurnsExceededError: budget spent with nothing to return
        """
        ctx = TurnContext(
            llm=llm,
            agent_config=agent_config,
            config=self.config,
            tools=self._build_registry(tools),
            history=ConversationBuffer(history),
            state=state or AgentState(),
            memory=self._share(memory),
            wire=wire,
            abort_signal=abort_signal,
        )
        max_turns = self.config.max_turns

        logger.info(
            "execution_started",
            executor=type(self).__name__,
            agent=agent_config.name,
            submission_id=str(task.submission_id),
            max_turns=max_turns,
            tools=ctx.tools.names(),
        )

        await self._append(ctx, ChatMessage.user().content(task.prompt).build())

        accumulated: list[ToolCallResult] = []
        thoughts: list[str] = []
        final_response = ""

        for turn in range(max_turns):
            ctx.turn = turn
            if abort_signal is not None and abort_signal.is_aborted():
                raise FatalTurnError(f"aborted: {abort_signal.reason}", turn)

            try:
                await self._summarize_if_needed(ctx)

                self._emit(ctx, TurnStarted(turn_number=turn, max_turns=max_turns))
                logger.debug("turn_started", turn=turn, max_turns=max_turns)

                result = await self.process_turn(ctx)
            except asyncio.CancelledError:
                if abort_signal is not None and abort_signal.is_aborted():
                    raise FatalTurnError(f"aborted: {abort_signal.reason}", turn) from None
                raise

            if isinstance(result, Complete):
                output = result.output
                if accumulated or thoughts:
                    output = output.model_copy(
                        update={
                            "tool_calls": accumulated + output.tool_calls,
                            "thoughts": thoughts + output.thoughts,
                        }
                    )
                output = output.model_copy(update={"termination_reason": "complete"})
                self._emit(ctx, TurnCompleted(turn_number=turn, final_turn=True))
                logger.info(
                    "execution_completed",
                    turns=turn + 1,
                    tool_calls=len(output.tool_calls),
                )
                return output

            if isinstance(result, Continue):
                if result.output is not None:
                    accumulated.extend(result.output.tool_calls)
                    thoughts.extend(result.output.thoughts)
                    if result.output.response:
                        final_response = result.output.response
                self._emit(ctx, TurnCompleted(turn_number=turn, final_turn=False))
                continue

            if isinstance(result, TurnError):
                logger.warning("turn_error", turn=turn, error=result.message)
                self._emit(ctx, TurnCompleted(turn_number=turn, final_turn=False))
                continue

            if isinstance(result, Fatal):
                logger.error("turn_fatal", turn=turn, reason=result.reason)
                raise FatalTurnError(result.reason, turn)

            raise TypeError(f"process_turn returned {type(result).__name__}")

        logger.warning(
            "max_turns_exceeded",
            max_turns=max_turns,
            tool_calls=len(accumulated),
            has_response=bool(final_response),
        )

        if not final_response and not accumulated:
            raise MaxTurnsExceededError(max_turns)

        partial = AgentOutput(
            response=final_response,
            tool_calls=accumulated,
            thoughts=thoughts,
            termination_reason="max_turns",
        )
        if self.config.strict_max_turns:
            raise MaxTurnsExceededError(max_turns, partial=partial)
        return partial

    # ------------------------------------------------------------------
    # Turn
    # ------------------------------------------------------------------

    async def process_turn(self, ctx: TurnContext) -> TurnResult[AgentOutput]:
        """Run one model call and resolve the tool calls it requests."""
        messages = await self._build_context(ctx)
        response = await self._call_llm(ctx, messages)

        text = response.text() or ""
        raw_calls = response.tool_calls()

        if not raw_calls:
            if text:
                await self._append(ctx, ChatMessage.assistant().content(text).build())
            return Complete(self.build_final(text, response))

        tool_calls = self._extract_tool_calls(raw_calls)

        await self._append(ctx, ChatMessage.assistant().content(text).tool_use(tool_calls).build())

        results = ctx.tool_executor.execute_batch(tool_calls)

        await self._append(
            ctx,
            ChatMessage.tool().tool_result(self._substitute_results(tool_calls, results)).build(),
        )

        for r in results:
            await ctx.state.record_tool_call(r)

        logger.debug(
            "tool_calls_resolved",
            turn=ctx.turn,
            requested=len(tool_calls),
            failed=sum(1 for r in results if not r.success),
        )
        return Continue(self.build_partial(text, response, results))

    def build_partial(
        self, text: str, response: ChatResponse, results: list[ToolCallResult]
    ) -> AgentOutput:
        return AgentOutput(response=text, tool_calls=results)

    def build_final(self, text: str, response: ChatResponse) -> AgentOutput:
        return AgentOutput(response=text)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    async def _build_context(self, ctx: TurnContext) -> list[ChatMessage]:
        if ctx.memory is not None:
            messages = await ctx.memory.recall("", None)
        else:
            messages = await ctx.history.snapshot()

        instructions = ctx.agent_config.instructions
        if instructions and (not messages or messages[0].role != ChatRole.SYSTEM):
            messages.insert(0, ChatMessage.system().content(instructions).build())
        return messages

    async def _call_llm(self, ctx: TurnContext, messages: list[ChatMessage]) -> ChatResponse:
        schema = ctx.agent_config.output_schema
        if ctx.tools:
            call = ctx.llm.chat_with_tools(messages, ctx.tools.schemas(), schema)
        else:
            call = ctx.llm.chat(messages, schema)

        try:
            return await race_abort(call, ctx.abort_signal)
        except (LLMError, asyncio.CancelledError):
            raise
        except Exception as e:
            logger.error("llm_call_failed", turn=ctx.turn, error=str(e), exc_info=True)
            raise LLMError(str(e)) from e

    def _extract_tool_calls(self, raw_calls: object) -> list[ToolCall]:
        try:
            calls = [
                c if isinstance(c, ToolCall) else ToolCall.model_validate(c)
                for c in raw_calls  # type: ignore[union-attr]
            ]
        except (TypeError, ValidationError) as e:
            raise LLMError(f"Tool calls expected but none found: {e}") from e
        if not calls:
            raise LLMError("Tool calls expected but none found")

        ids = [c.id for c in calls]
        if len(set(ids)) != len(ids):
            logger.warning("duplicate_tool_call_ids", ids=ids)
        return calls

    def _substitute_results(
        self, tool_calls: list[ToolCall], results: list[ToolCallResult]
    ) -> list[ToolCall]:
        """Copy each call with its textual result in function.arguments."""
        substituted = []
        for call, result in zip(tool_calls, results):
            if result.success:
                content = (
                    result.result
                    if isinstance(result.result, str)
                    else json.dumps(result.result, default=str)
                )
            else:
                content = json.dumps({"error": result.error})
            substituted.append(
                ToolCall(
                    id=call.id,
                    call_type=call.call_type,
                    function=FunctionCall(name=call.function.name, arguments=content),
                )
            )
        return substituted

    async def _append(self, ctx: TurnContext, message: ChatMessage) -> None:
        await ctx.history.append(message)
        await ctx.state.record_conversation(message)
        if ctx.memory is not None:
            try:
                await ctx.memory.remember(message)
            except MemoryProviderError as e:
                logger.warning("memory_remember_failed", role=message.role.value, error=str(e))

    async def _summarize_if_needed(self, ctx: TurnContext) -> None:
        if ctx.memory is None or not self.config.summarize_on_overflow:
            return
        if not ctx.memory.needs_summary():
            return

        messages = await ctx.memory.recall("", None)
        try:
            summary = await race_abort(ctx.llm.summarize_history(messages), ctx.abort_signal)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            raise LLMError(f"Summarization failed: {e}") from e

        await ctx.memory.replace_with_summary(summary)
        logger.info("memory_summarized", turn=ctx.turn, collapsed=len(messages))

    def _build_registry(self, tools: ToolRegistry | list[Tool] | None) -> ToolRegistry:
        if isinstance(tools, ToolRegistry):
            if self.config.reject_duplicate_tools and len(set(tools.names())) != len(tools):
                # Re-register to surface the duplicate name
                ToolRegistry(tools, reject_duplicates=True)
            return tools
        return ToolRegistry(tools or [], reject_duplicates=self.config.reject_duplicate_tools)

    @staticmethod
    def _share(memory: SharedMemory | MemoryProvider | None) -> SharedMemory | None:
        if memory is None or isinstance(memory, SharedMemory):
            return memory
        return SharedMemory(memory)

    @staticmethod
    def _emit(ctx: TurnContext, event) -> None:
        if ctx.wire is not None:
            ctx.wire.emit(event)


__all__ = ["TurnContext", "TurnExecutor"]
