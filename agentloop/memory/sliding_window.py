"""
Sliding window memory.

Keeps at most `window_size` messages. What happens on overflow depends on
the trim strategy:

- DROP: the oldest message is evicted (strict FIFO)
- SUMMARIZE: nothing is evicted; the memory flags `needs_summary` and the
  owner later collapses it with replace_with_summary()
"""

from collections import deque
from enum import Enum

from agentloop.domain import ChatMessage
from agentloop.memory.base import MemoryProvider, MemoryType


class TrimStrategy(str, Enum):
    """Strategy for handling memory when window size limit is reached"""

    DROP = "drop"
    SUMMARIZE = "summarize"


class SlidingWindowMemory(MemoryProvider):
    """Memory that keeps the N most recent messages."""

    def __init__(self, window_size: int, strategy: TrimStrategy = TrimStrategy.DROP):
        if window_size <= 0:
            raise ValueError("Window size must be greater than 0")
        self._window_size = window_size
        self._strategy = strategy
        self._messages: deque[ChatMessage] = deque()
        self._needs_summary = False

    @classmethod
    def with_strategy(cls, window_size: int, strategy: TrimStrategy) -> "SlidingWindowMemory":
        return cls(window_size, strategy)

    @property
    def window_size(self) -> int:
        return self._window_size

    @property
    def strategy(self) -> TrimStrategy:
        return self._strategy

    def messages(self) -> list[ChatMessage]:
        """All stored messages from oldest to newest."""
        return list(self._messages)

    def recent_messages(self, limit: int) -> list[ChatMessage]:
        """The most recent `limit` messages, oldest first."""
        if limit <= 0:
            return []
        return list(self._messages)[-limit:]

    async def remember(self, message: ChatMessage) -> None:
        if len(self._messages) >= self._window_size:
            if self._strategy == TrimStrategy.DROP:
                self._messages.popleft()
            else:
                self.mark_for_summary()
        self._messages.append(message)

    async def recall(self, query: str, limit: int | None = None) -> list[ChatMessage]:
        if limit is None:
            limit = len(self._messages)
        return self.recent_messages(limit)

    async def clear(self) -> None:
        self._messages.clear()

    def memory_type(self) -> MemoryType:
        return MemoryType.SLIDING_WINDOW

    def size(self) -> int:
        return len(self._messages)

    def needs_summary(self) -> bool:
        return self._needs_summary

    def mark_for_summary(self) -> None:
        self._needs_summary = True

    def replace_with_summary(self, summary: str) -> None:
        self._messages.clear()
        self._messages.append(ChatMessage.assistant().content(summary).build())
        self._needs_summary = False


__all__ = ["TrimStrategy", "SlidingWindowMemory"]
