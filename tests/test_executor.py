"""
Tests for the turn state machine and the driver loop.
"""

import asyncio
import json
from unittest.mock import MagicMock

import pytest

from agentloop.agent import (
    AgentOutput,
    Continue,
    DefaultExecutor,
    Fatal,
    ReActExecutor,
    TurnError,
)
from agentloop.config import AgentConfig, ExecutionConfig
from agentloop.domain import (
    ChatMessage,
    ChatRole,
    StructuredOutputFormat,
    Task,
    ToolCallCompleted,
    ToolCallFailed,
    ToolCallRequested,
    TurnCompleted,
    TurnStarted,
)
from agentloop.exceptions import (
    DuplicateToolError,
    FatalTurnError,
    LLMError,
    MaxTurnsExceededError,
)
from agentloop.llm import ChatResponse, LLMProvider
from agentloop.memory import SlidingWindowMemory, TrimStrategy
from agentloop.runtime import AbortSignal, AgentState
from agentloop.tools import FunctionTool

from helpers import ScriptedLLM, make_call, text_response, tool_response


@pytest.fixture
def agent_config():
    return AgentConfig(name="math", description="You add numbers.")


def add_2_and_3():
    return tool_response(make_call("call_1", "Addition", '{"left": 2, "right": 3}'))


@pytest.mark.asyncio
async def test_add_scenario(addition, agent_config, wire):
    llm = ScriptedLLM([add_2_and_3(), text_response("The sum is 5")])
    state = AgentState()

    output = await DefaultExecutor().execute(
        llm,
        Task(prompt="Add 2 and 3"),
        agent_config,
        tools=[addition],
        state=state,
        wire=wire,
    )

    assert output.response == "The sum is 5"
    assert output.termination_reason == "complete"
    assert len(output.tool_calls) == 1
    result = output.tool_calls[0]
    assert result.tool_name == "Addition"
    assert result.success is True
    assert result.arguments == {"left": 2, "right": 3}
    assert result.result == 5

    history = await state.get_history()
    assert [m.role for m in history.messages] == [
        ChatRole.USER,
        ChatRole.ASSISTANT,
        ChatRole.TOOL,
        ChatRole.ASSISTANT,
    ]
    assert history.messages[1].is_tool_use()
    tool_result = history.messages[2]
    assert tool_result.is_tool_result()
    assert tool_result.tool_calls[0].id == "call_1"
    assert tool_result.tool_calls[0].function.arguments == "5"
    assert history.tool_calls == [result]

    assert [type(e) for e in wire.drain()] == [
        TurnStarted,
        ToolCallRequested,
        ToolCallCompleted,
        TurnCompleted,
        TurnStarted,
        TurnCompleted,
    ]


@pytest.mark.asyncio
async def test_tools_are_offered_on_every_call(addition, agent_config):
    llm = ScriptedLLM([add_2_and_3(), text_response("5")])

    await DefaultExecutor().execute(llm, Task(prompt="Add 2 and 3"), agent_config, tools=[addition])

    assert len(llm.calls) == 2
    for _, tools, _ in llm.calls:
        assert [t.function.name for t in tools] == ["Addition"]


@pytest.mark.asyncio
async def test_system_message_synthesized_from_description(agent_config):
    llm = ScriptedLLM([text_response("hi")])

    await DefaultExecutor().execute(llm, Task(prompt="hello"), agent_config)

    messages, tools, _ = llm.calls[0]
    assert tools is None
    assert messages[0].role == ChatRole.SYSTEM
    assert messages[0].content == "You add numbers."
    assert messages[1].content == "hello"


@pytest.mark.asyncio
async def test_existing_system_message_is_not_duplicated(agent_config):
    llm = ScriptedLLM([text_response("hi")])
    prior = [ChatMessage.system().content("Custom system").build()]

    await DefaultExecutor().execute(llm, Task(prompt="hello"), agent_config, history=prior)

    messages, _, _ = llm.calls[0]
    assert [m.role for m in messages].count(ChatRole.SYSTEM) == 1
    assert messages[0].content == "Custom system"


@pytest.mark.asyncio
async def test_output_schema_is_passed_through():
    schema = StructuredOutputFormat(name="Answer", schema={"type": "object"}, strict=True)
    config = AgentConfig(name="structured", output_schema=schema)
    llm = ScriptedLLM([text_response('{"value": 1}')])

    await DefaultExecutor().execute(llm, Task(prompt="go"), config)

    assert llm.calls[0][2] is schema


@pytest.mark.asyncio
async def test_completion_appends_single_assistant_message(agent_config):
    state = AgentState()
    llm = ScriptedLLM([text_response("final answer")])

    output = await DefaultExecutor().execute(llm, Task(prompt="q"), agent_config, state=state)

    history = await state.get_history()
    assistant = [m for m in history.messages if m.role == ChatRole.ASSISTANT]
    assert len(assistant) == 1
    assert assistant[0].content == "final answer"
    assert assistant[0].is_text()
    assert output.tool_calls == []


@pytest.mark.asyncio
async def test_empty_completion_appends_nothing(agent_config):
    state = AgentState()
    llm = ScriptedLLM([ChatResponse()])

    output = await DefaultExecutor().execute(llm, Task(prompt="q"), agent_config, state=state)

    history = await state.get_history()
    assert [m.role for m in history.messages] == [ChatRole.USER]
    assert output.response == ""


@pytest.mark.asyncio
async def test_unknown_tool_and_bad_arguments_do_not_stop_the_turn(addition, agent_config, wire):
    llm = ScriptedLLM(
        [
            tool_response(
                make_call("a", "Subtraction", '{"left": 1}'),
                make_call("b", "Addition", "{broken"),
                make_call("c", "Addition", '{"left": 1, "right": 1}'),
            ),
            text_response("done"),
        ]
    )

    output = await DefaultExecutor().execute(
        llm, Task(prompt="q"), agent_config, tools=[addition], wire=wire
    )

    assert [r.success for r in output.tool_calls] == [False, False, True]
    assert output.tool_calls[0].result == {"error": "Tool 'Subtraction' not found"}
    assert output.tool_calls[1].arguments is None

    events = wire.drain()
    requested = [e for e in events if isinstance(e, ToolCallRequested)]
    finished = [e for e in events if isinstance(e, (ToolCallCompleted, ToolCallFailed))]
    assert [e.id for e in requested] == ["a", "b", "c"]
    assert [e.id for e in finished] == ["a", "b", "c"]

    # The model sees the error payload on the next call
    messages, _, _ = llm.calls[1]
    tool_message = messages[-1]
    assert tool_message.is_tool_result()
    first = tool_message.tool_calls[0].function.arguments
    assert json.loads(first) == {"error": "Tool 'Subtraction' not found"}


@pytest.mark.asyncio
async def test_results_accumulate_across_turns(addition, agent_config):
    llm = ScriptedLLM(
        [
            tool_response(make_call("1", "Addition", '{"left": 1, "right": 1}')),
            tool_response(make_call("2", "Addition", '{"left": 2, "right": 2}')),
            text_response("2 and 4"),
        ]
    )

    output = await DefaultExecutor().execute(llm, Task(prompt="q"), agent_config, tools=[addition])

    assert [r.result for r in output.tool_calls] == [2, 4]
    assert output.response == "2 and 4"


# ============================================================================
# Turn budget
# ============================================================================


@pytest.mark.asyncio
async def test_budget_exhausted_returns_best_effort(addition, agent_config, wire):
    llm = ScriptedLLM([tool_response(make_call("1", "Addition", '{"left": 2, "right": 3}'))])
    executor = DefaultExecutor(ExecutionConfig(max_turns=1))

    output = await executor.execute(
        llm, Task(prompt="Add 2 and 3"), agent_config, tools=[addition], wire=wire
    )

    assert output.termination_reason == "max_turns"
    assert output.exhausted is True
    assert len(output.tool_calls) == 1
    assert len(llm.calls) == 1

    turn_events = [e for e in wire.drain() if isinstance(e, (TurnStarted, TurnCompleted))]
    assert len(turn_events) == 2
    assert turn_events[-1].final_turn is False


@pytest.mark.asyncio
async def test_budget_bounds_llm_calls(addition, agent_config):
    responses = [
        tool_response(make_call(str(i), "Addition", '{"left": 1, "right": 1}'), content=f"step {i}")
        for i in range(10)
    ]
    llm = ScriptedLLM(responses)
    executor = DefaultExecutor(ExecutionConfig(max_turns=3))

    output = await executor.execute(llm, Task(prompt="q"), agent_config, tools=[addition])

    assert len(llm.calls) == 3
    assert len(output.tool_calls) == 3
    assert output.response == "step 2"


@pytest.mark.asyncio
async def test_strict_budget_raises_with_partial(addition, agent_config):
    llm = ScriptedLLM([tool_response(make_call("1", "Addition", '{"left": 2, "right": 3}'))])
    executor = DefaultExecutor(ExecutionConfig(max_turns=1, strict_max_turns=True))

    with pytest.raises(MaxTurnsExceededError) as exc_info:
        await executor.execute(llm, Task(prompt="q"), agent_config, tools=[addition])

    assert exc_info.value.max_turns == 1
    assert isinstance(exc_info.value.partial, AgentOutput)
    assert len(exc_info.value.partial.tool_calls) == 1


class AlwaysErroring(DefaultExecutor):
    async def process_turn(self, ctx):
        return TurnError("transient")


class AlwaysContinuing(DefaultExecutor):
    async def process_turn(self, ctx):
        return Continue(None)


class FatalOnSecondTurn(DefaultExecutor):
    async def process_turn(self, ctx):
        if ctx.turn == 1:
            return Fatal("corrupted context")
        return Continue(None)


@pytest.mark.asyncio
@pytest.mark.parametrize("executor_cls", [AlwaysErroring, AlwaysContinuing])
async def test_nothing_produced_raises_max_turns(executor_cls, agent_config):
    executor = executor_cls(ExecutionConfig(max_turns=2))

    with pytest.raises(MaxTurnsExceededError) as exc_info:
        await executor.execute(ScriptedLLM([]), Task(prompt="q"), agent_config)

    assert exc_info.value.max_turns == 2
    assert str(exc_info.value) == "Maximum turns exceeded: 2"


@pytest.mark.asyncio
async def test_fatal_turn_aborts(agent_config, wire):
    executor = FatalOnSecondTurn(ExecutionConfig(max_turns=5))

    with pytest.raises(FatalTurnError) as exc_info:
        await executor.execute(ScriptedLLM([]), Task(prompt="q"), agent_config, wire=wire)

    assert exc_info.value.reason == "corrupted context"
    assert exc_info.value.turn == 1
    started = [e for e in wire.drain() if isinstance(e, TurnStarted)]
    assert len(started) == 2


# ============================================================================
# Errors
# ============================================================================


@pytest.mark.asyncio
async def test_llm_failure_propagates_as_llm_error(agent_config):
    llm = ScriptedLLM([ConnectionError("upstream down")])

    with pytest.raises(LLMError) as exc_info:
        await DefaultExecutor().execute(llm, Task(prompt="q"), agent_config)

    assert "upstream down" in str(exc_info.value)
    assert isinstance(exc_info.value.__cause__, ConnectionError)
    assert len(llm.calls) == 1


@pytest.mark.asyncio
async def test_unextractable_tool_calls_raise_llm_error(agent_config):
    response = MagicMock()
    response.text.return_value = ""
    response.tool_calls.return_value = [object()]
    llm = ScriptedLLM([response])

    with pytest.raises(LLMError):
        await DefaultExecutor().execute(llm, Task(prompt="q"), agent_config)


@pytest.mark.asyncio
async def test_duplicate_tools_rejected_when_configured(agent_config):
    def a() -> str:
        return "a"

    def b() -> str:
        return "b"

    tools = [FunctionTool(a, name="same"), FunctionTool(b, name="same")]
    executor = DefaultExecutor(ExecutionConfig(reject_duplicate_tools=True))

    with pytest.raises(DuplicateToolError):
        await executor.execute(ScriptedLLM([]), Task(prompt="q"), agent_config, tools=tools)


@pytest.mark.asyncio
async def test_duplicate_tools_first_registered_wins(agent_config):
    def a() -> str:
        return "a"

    def b() -> str:
        return "b"

    tools = [FunctionTool(a, name="same"), FunctionTool(b, name="same")]
    llm = ScriptedLLM([tool_response(make_call("1", "same")), text_response("ok")])

    output = await DefaultExecutor().execute(llm, Task(prompt="q"), agent_config, tools=tools)

    assert output.tool_calls[0].result == "a"


# ============================================================================
# Memory
# ============================================================================


@pytest.mark.asyncio
async def test_memory_is_the_context_source(addition, agent_config):
    memory = SlidingWindowMemory(20)
    await memory.remember(ChatMessage.user().content("earlier question").build())
    await memory.remember(ChatMessage.assistant().content("earlier answer").build())
    llm = ScriptedLLM([add_2_and_3(), text_response("5")])

    await DefaultExecutor().execute(
        llm, Task(prompt="Add 2 and 3"), agent_config, tools=[addition], memory=memory
    )

    first_messages, _, _ = llm.calls[0]
    assert [m.content for m in first_messages[1:]] == [
        "earlier question",
        "earlier answer",
        "Add 2 and 3",
    ]
    assert memory.size() == 6
    assert memory.messages()[-1].content == "5"


@pytest.mark.asyncio
async def test_memory_summarized_when_window_overflows(addition):
    config = AgentConfig(name="summarizer")
    memory = SlidingWindowMemory(2, TrimStrategy.SUMMARIZE)
    llm = ScriptedLLM(
        [
            add_2_and_3(),
            text_response("User asked to add 2 and 3; the tool returned 5."),
            text_response("The sum is 5"),
        ]
    )

    output = await DefaultExecutor().execute(
        llm, Task(prompt="Add 2 and 3"), config, tools=[addition], memory=memory
    )

    assert output.response == "The sum is 5"

    summary_request, summary_tools, _ = llm.calls[1]
    assert summary_tools is None
    assert summary_request[0].content.startswith("Summarize in 2-3 sentences:")

    final_messages, _, _ = llm.calls[2]
    assert [m.content for m in final_messages] == [
        "User asked to add 2 and 3; the tool returned 5."
    ]
    assert [m.content for m in memory.messages()] == [
        "User asked to add 2 and 3; the tool returned 5.",
        "The sum is 5",
    ]
    assert memory.needs_summary() is False


@pytest.mark.asyncio
async def test_summarization_can_be_disabled(addition):
    memory = SlidingWindowMemory(2, TrimStrategy.SUMMARIZE)
    llm = ScriptedLLM([add_2_and_3(), text_response("The sum is 5")])
    executor = DefaultExecutor(ExecutionConfig(summarize_on_overflow=False))

    await executor.execute(
        llm, Task(prompt="Add 2 and 3"), AgentConfig(name="x"), tools=[addition], memory=memory
    )

    assert len(llm.calls) == 2
    assert memory.needs_summary() is True


# ============================================================================
# Cancellation
# ============================================================================


class SlowLLM(LLMProvider):
    def __init__(self):
        self.cancelled = False

    async def chat_with_tools(self, messages, tools=None, schema=None):
        try:
            await asyncio.sleep(10)
        except asyncio.CancelledError:
            self.cancelled = True
            raise
        return text_response("too late")


@pytest.mark.asyncio
async def test_abort_before_first_turn(agent_config):
    signal = AbortSignal()
    signal.abort("user cancelled")
    llm = ScriptedLLM([text_response("never")])

    with pytest.raises(FatalTurnError) as exc_info:
        await DefaultExecutor().execute(
            llm, Task(prompt="q"), agent_config, abort_signal=signal
        )

    assert "user cancelled" in exc_info.value.reason
    assert llm.calls == []


class SlowSummaryLLM(LLMProvider):
    """Requests one addition, then stalls on the summary call."""

    async def chat_with_tools(self, messages, tools=None, schema=None):
        if tools is None:
            await asyncio.sleep(10)
        return add_2_and_3()


@pytest.mark.asyncio
async def test_abort_during_summarization(addition):
    signal = AbortSignal()
    memory = SlidingWindowMemory(2, TrimStrategy.SUMMARIZE)

    run = asyncio.create_task(
        DefaultExecutor().execute(
            SlowSummaryLLM(),
            Task(prompt="Add 2 and 3"),
            AgentConfig(name="x"),
            tools=[addition],
            memory=memory,
            abort_signal=signal,
        )
    )
    await asyncio.sleep(0.01)
    signal.abort("stop")

    with pytest.raises(FatalTurnError) as exc_info:
        await run

    assert exc_info.value.reason == "aborted: stop"
    assert exc_info.value.turn == 1
    assert memory.needs_summary() is True


@pytest.mark.asyncio
async def test_abort_during_llm_call(agent_config):
    signal = AbortSignal()
    llm = SlowLLM()

    run = asyncio.create_task(
        DefaultExecutor().execute(llm, Task(prompt="q"), agent_config, abort_signal=signal)
    )
    await asyncio.sleep(0.01)
    signal.abort("stop")

    with pytest.raises(FatalTurnError) as exc_info:
        await run

    assert exc_info.value.reason == "aborted: stop"
    assert exc_info.value.turn == 0
    await asyncio.sleep(0)
    assert llm.cancelled is True


# ============================================================================
# ReAct
# ============================================================================


@pytest.mark.asyncio
async def test_react_collects_thoughts(addition, agent_config):
    llm = ScriptedLLM(
        [
            ChatResponse(
                content="I should add the numbers.",
                thinking_content="needs arithmetic",
                calls=[make_call("1", "Addition", '{"left": 2, "right": 3}')],
            ),
            text_response("The sum is 5"),
        ]
    )

    output = await ReActExecutor().execute(
        llm, Task(prompt="Add 2 and 3"), agent_config, tools=[addition]
    )

    assert output.response == "The sum is 5"
    assert output.thoughts == ["needs arithmetic", "I should add the numbers."]
    assert output.tool_calls[0].result == 5


@pytest.mark.asyncio
async def test_default_executor_drops_interim_text(addition, agent_config):
    llm = ScriptedLLM(
        [
            tool_response(
                make_call("1", "Addition", '{"left": 2, "right": 3}'), content="Let me add."
            ),
            text_response("The sum is 5"),
        ]
    )

    output = await DefaultExecutor().execute(
        llm, Task(prompt="Add 2 and 3"), agent_config, tools=[addition]
    )

    assert output.thoughts == []
    assert output.response == "The sum is 5"
