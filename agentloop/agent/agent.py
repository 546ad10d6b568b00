"""
Agent - configuration container that runs tasks through an executor.

Agent.run() owns the task lifecycle:
- emits TaskStarted before the executor runs
- emits TaskComplete with the serialized AgentOutput, or TaskError
- records the completed task in the agent state

Turn and tool events are emitted by the executor onto the same wire.
"""

import asyncio
from uuid import UUID

from agentloop.agent.default import DefaultExecutor
from agentloop.agent.executor import TurnExecutor
from agentloop.agent.result import AgentRunResult
from agentloop.config import AgentConfig
from agentloop.domain import StructuredOutputFormat, Task, TaskComplete, TaskError, TaskStarted
from agentloop.exceptions import AgentLoopError
from agentloop.llm import LLMProvider
from agentloop.memory import MemoryProvider, SharedMemory
from agentloop.runtime import AbortSignal, AgentState, Wire
from agentloop.tools import Tool, ToolRegistry
from agentloop.utils.logging import get_logger

logger = get_logger(__name__)


class Agent:
    """
    Agent Configuration Container.

    Holds identity, tools and memory, and delegates each task to its
    TurnExecutor. Memory and state persist across tasks run on the same
    agent.
    """

    def __init__(
        self,
        name: str,
        description: str = "",
        executor: TurnExecutor | None = None,
        tools: list[Tool] | ToolRegistry | None = None,
        memory: MemoryProvider | SharedMemory | None = None,
        system_prompt: str | None = None,
        output_schema: StructuredOutputFormat | None = None,
        id: UUID | None = None,
    ):
        config_kwargs = {"id": id} if id is not None else {}
        self.config = AgentConfig(
            name=name,
            description=description,
            system_prompt=system_prompt,
            output_schema=output_schema,
            **config_kwargs,
        )
        self.executor = executor or DefaultExecutor()
        self.tools = tools if isinstance(tools, ToolRegistry) else ToolRegistry(
            tools or [], reject_duplicates=self.executor.config.reject_duplicate_tools
        )
        if memory is not None and not isinstance(memory, SharedMemory):
            memory = SharedMemory(memory)
        self.memory: SharedMemory | None = memory
        self.state = AgentState()

    @property
    def id(self) -> UUID:
        return self.config.id

    @property
    def name(self) -> str:
        return self.config.name

    async def run(
        self,
        task: Task | str,
        llm: LLMProvider,
        wire: Wire | None = None,
        abort_signal: AbortSignal | None = None,
    ) -> AgentRunResult:
        """
        Run one task to completion.

        Args:
            task: Task or bare prompt
            llm: Chat provider for this run
            wire: Optional event channel
            abort_signal: Optional cancellation signal

        Returns:
            AgentRunResult: success with the serialized AgentOutput, or a
                failure carrying the error message. Agent-level errors never
                escape; cancellation of the calling task does.
        """
        if isinstance(task, str):
            task = Task(prompt=task, agent_id=self.id)

        self._emit(
            wire,
            TaskStarted(sub_id=task.submission_id, agent_id=self.id, task_description=task.prompt),
        )
        logger.info("task_started", agent=self.name, submission_id=str(task.submission_id))

        try:
            output = await self.executor.execute(
                llm,
                task,
                self.config,
                tools=self.tools,
                memory=self.memory,
                state=self.state,
                wire=wire,
                abort_signal=abort_signal,
            )
        except AgentLoopError as e:
            logger.error(
                "task_failed",
                agent=self.name,
                submission_id=str(task.submission_id),
                error=str(e),
                error_type=type(e).__name__,
            )
            self._emit(wire, TaskError(sub_id=task.submission_id, error=str(e)))
            await self.state.record_task(task)
            return AgentRunResult.failure(
                str(e),
                metadata={"agent": self.name, "error_type": type(e).__name__},
            )

        result = output.model_dump(mode="json")
        await self.state.record_task(task.complete(result))
        self._emit(wire, TaskComplete(sub_id=task.submission_id, result=result))
        logger.info(
            "task_completed",
            agent=self.name,
            submission_id=str(task.submission_id),
            termination_reason=output.termination_reason,
        )
        return AgentRunResult.ok(
            result,
            metadata={"agent": self.name, "termination_reason": output.termination_reason},
        )

    def spawn(
        self,
        task: Task | str,
        llm: LLMProvider,
        wire: Wire | None = None,
        abort_signal: AbortSignal | None = None,
    ) -> "asyncio.Task[AgentRunResult]":
        """Schedule run() on the running event loop."""
        return asyncio.create_task(self.run(task, llm, wire, abort_signal))

    @staticmethod
    def _emit(wire: Wire | None, event) -> None:
        if wire is not None:
            wire.emit(event)

    def __repr__(self) -> str:
        return f"Agent(name={self.name!r}, executor={type(self.executor).__name__}, tools={self.tools.names()})"


__all__ = ["Agent"]
