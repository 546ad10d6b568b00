"""
Lock-guarded handle around a memory provider.

The executor and external inspectors share one SharedMemory. Each call
takes the lock for exactly one provider operation.
"""

import asyncio

from agentloop.domain import ChatMessage
from agentloop.memory.base import MemoryProvider, MemoryType


class SharedMemory:
    def __init__(self, provider: MemoryProvider):
        self.provider = provider
        self._lock = asyncio.Lock()

    async def remember(self, message: ChatMessage) -> None:
        async with self._lock:
            await self.provider.remember(message)

    async def recall(self, query: str = "", limit: int | None = None) -> list[ChatMessage]:
        async with self._lock:
            return await self.provider.recall(query, limit)

    async def clear(self) -> None:
        async with self._lock:
            await self.provider.clear()

    async def replace_with_summary(self, summary: str) -> None:
        async with self._lock:
            self.provider.replace_with_summary(summary)

    def needs_summary(self) -> bool:
        return self.provider.needs_summary()

    def memory_type(self) -> MemoryType:
        return self.provider.memory_type()

    def size(self) -> int:
        return self.provider.size()

    def __repr__(self) -> str:
        return f"SharedMemory({type(self.provider).__name__}, size={self.size()})"


__all__ = ["SharedMemory"]
