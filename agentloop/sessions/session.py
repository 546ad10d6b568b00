"""
Session - task queue plus the agents that can run its tasks.

Tasks are queued with add_task() (emitting NewTask) and dequeued in FIFO
order by run()/run_all(). The dequeued task becomes the current task until
the next one is taken.
"""

import asyncio
from uuid import UUID, uuid4

from agentloop.agent import Agent, AgentRunResult
from agentloop.domain import NewTask, Task
from agentloop.exceptions import AgentNotFoundError, NoTaskSetError
from agentloop.llm import LLMProvider
from agentloop.runtime import Wire
from agentloop.utils.logging import get_logger

logger = get_logger(__name__)


class Session:
    def __init__(self, wire: Wire | None = None, session_id: UUID | None = None):
        self.id = session_id or uuid4()
        self.wire = wire
        self._current_task: Task | None = None
        self._task_queue: list[Task] = []
        self._agents: dict[UUID, Agent] = {}
        self._lock = asyncio.Lock()

    # ------------------------------------------------------------------
    # Task queue
    # ------------------------------------------------------------------

    async def add_task(self, task: Task) -> None:
        if self.wire is not None:
            self.wire.emit(
                NewTask(sub_id=task.submission_id, agent_id=task.agent_id, prompt=task.prompt)
            )
        async with self._lock:
            self._task_queue.append(task)
        logger.debug("task_queued", session_id=str(self.id), submission_id=str(task.submission_id))

    async def set_current_task(self, task: Task) -> None:
        async with self._lock:
            self._current_task = task

    async def is_task_queue_empty(self) -> bool:
        async with self._lock:
            return not self._task_queue

    async def get_top_task(self) -> Task | None:
        """Dequeue the oldest task and make it current."""
        async with self._lock:
            if not self._task_queue:
                return None
            task = self._task_queue.pop(0)
            self._current_task = task
            return task

    async def get_current_task(self) -> Task | None:
        async with self._lock:
            return self._current_task

    async def get_task(self, sub_id: UUID) -> Task | None:
        """Find a still-queued task by submission id."""
        async with self._lock:
            for task in self._task_queue:
                if task.submission_id == sub_id:
                    return task
            return None

    # ------------------------------------------------------------------
    # Agents
    # ------------------------------------------------------------------

    def register_agent(self, agent: Agent, agent_id: UUID | None = None) -> UUID:
        """Register an agent under `agent_id` (defaults to the agent's own id)."""
        agent_id = agent_id or agent.id
        self._agents[agent_id] = agent
        logger.debug("agent_registered", session_id=str(self.id), agent=agent.name)
        return agent_id

    def get_agent(self, agent_id: UUID) -> Agent:
        agent = self._agents.get(agent_id)
        if agent is None:
            raise AgentNotFoundError(agent_id)
        return agent

    # ------------------------------------------------------------------
    # Execution
    # ------------------------------------------------------------------

    async def run_task(self, task: Task, agent_id: UUID, llm: LLMProvider) -> AgentRunResult:
        """
        Run `task` on a registered agent.

        Raises:
            AgentNotFoundError: no agent registered under agent_id
        """
        agent = self.get_agent(agent_id)
        return await agent.spawn(task, llm, self.wire)

    async def run(self, agent_id: UUID, llm: LLMProvider) -> AgentRunResult:
        """
        Run the oldest queued task.

        Raises:
            NoTaskSetError: the queue is empty
        """
        task = await self.get_top_task()
        if task is None:
            raise NoTaskSetError(agent_id)
        return await self.run_task(task, agent_id, llm)

    async def run_all(self, agent_id: UUID, llm: LLMProvider) -> list[AgentRunResult]:
        """Drain the queue, one task at a time."""
        results = []
        while not await self.is_task_queue_empty():
            results.append(await self.run(agent_id, llm))
        return results


class SessionManager:
    """Creates sessions sharing one event wire and looks them up by id."""

    def __init__(self, wire: Wire | None = None):
        self.wire = wire
        self._sessions: dict[UUID, Session] = {}

    def create_session(self) -> Session:
        session = Session(self.wire)
        self._sessions[session.id] = session
        logger.info("session_created", session_id=str(session.id))
        return session

    def get_session(self, session_id: UUID) -> Session | None:
        return self._sessions.get(session_id)

    def __len__(self) -> int:
        return len(self._sessions)


__all__ = ["Session", "SessionManager"]
