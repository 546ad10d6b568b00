"""
Shared mutable state of a running agent.

Both classes guard their data with an asyncio.Lock that is held for one
read or one append at a time, never across an LLM call, so observers can
inspect them while a turn is waiting on the model.
"""

import asyncio

from pydantic import BaseModel, Field

from agentloop.domain import ChatMessage, Task, ToolCallResult


class History(BaseModel):
    """Snapshot of everything an agent has recorded."""

    messages: list[ChatMessage] = Field(default_factory=list)
    tool_calls: list[ToolCallResult] = Field(default_factory=list)
    tasks: list[Task] = Field(default_factory=list)


class AgentState:
    """Run-level accumulator shared between the executor and observers."""

    def __init__(self):
        self._history = History()
        self._lock = asyncio.Lock()

    async def record_conversation(self, message: ChatMessage) -> None:
        async with self._lock:
            self._history.messages.append(message)

    async def record_tool_call(self, result: ToolCallResult) -> None:
        async with self._lock:
            self._history.tool_calls.append(result)

    async def record_task(self, task: Task) -> None:
        async with self._lock:
            self._history.tasks.append(task)

    async def get_history(self) -> History:
        """Return a copy that later appends do not affect."""
        async with self._lock:
            return History(
                messages=list(self._history.messages),
                tool_calls=list(self._history.tool_calls),
                tasks=list(self._history.tasks),
            )


class ConversationBuffer:
    """
    In-memory message history used when no memory provider is attached.

    Messages are frozen, so snapshots share them safely.
    """

    def __init__(self, messages: list[ChatMessage] | None = None):
        self._messages: list[ChatMessage] = list(messages or [])
        self._lock = asyncio.Lock()

    async def append(self, message: ChatMessage) -> None:
        async with self._lock:
            self._messages.append(message)

    async def snapshot(self) -> list[ChatMessage]:
        async with self._lock:
            return list(self._messages)

    async def clear(self) -> None:
        async with self._lock:
            self._messages.clear()

    def __len__(self) -> int:
        return len(self._messages)


__all__ = ["History", "AgentState", "ConversationBuffer"]
