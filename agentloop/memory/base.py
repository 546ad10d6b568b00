"""
Memory provider contract.

A memory provider stores the conversation of an agent and hands it back,
oldest first, when the executor assembles the context for a turn. The
provider owns its truncation policy; the executor always recalls with no
limit.
"""

from abc import ABC, abstractmethod
from enum import Enum

from agentloop.domain import ChatMessage


class MemoryType(str, Enum):
    """Types of memory implementations available"""

    SLIDING_WINDOW = "sliding_window"


class MemoryProvider(ABC):
    """
    Store and retrieve conversation history.

    Only remember/recall/clear/memory_type/size are required. The
    summarization hooks default to a provider that never asks for a summary.
    """

    @abstractmethod
    async def remember(self, message: ChatMessage) -> None:
        """Store a message. Raises MemoryProviderError on failure."""

    @abstractmethod
    async def recall(self, query: str, limit: int | None = None) -> list[ChatMessage]:
        """
        Retrieve messages relevant to `query`, oldest first.

        Args:
            query: Search text; ignored by providers without retrieval
            limit: Maximum number of messages, None for all
        """

    @abstractmethod
    async def clear(self) -> None:
        """Remove every stored message."""

    @abstractmethod
    def memory_type(self) -> MemoryType:
        ...

    @abstractmethod
    def size(self) -> int:
        """Number of messages currently stored."""

    def is_empty(self) -> bool:
        return self.size() == 0

    def needs_summary(self) -> bool:
        return False

    def mark_for_summary(self) -> None:
        pass

    def replace_with_summary(self, summary: str) -> None:
        pass

    async def remember_with_role(self, message: ChatMessage, role: str) -> None:
        """Store a message on behalf of a named sender."""
        await self.remember(message)


__all__ = ["MemoryType", "MemoryProvider"]
