"""
Wire - event channel between the execution loop and its observers.

Wire is a bounded FIFO. Writers never wait: when the queue is full or the
wire is closed, the event is dropped and counted. Readers iterate until the
wire is closed and drained.

Usage:
    wire = Wire(maxsize=100)

    async def run():
        try:
            return await agent.run(task, llm, wire)
        finally:
            wire.close()  # neither Agent nor Session closes the wire

    runner = asyncio.create_task(run())
    async for event in wire.read():
        print(event.type)
    result = await runner
"""

import asyncio
from typing import TYPE_CHECKING, AsyncIterator

from agentloop.config.settings import settings
from agentloop.utils.logging import get_logger

if TYPE_CHECKING:
    from agentloop.domain import BaseEvent

logger = get_logger(__name__)


class Wire:
    """
    Event streaming channel for one execution.

    - emit(): non-blocking put, drops on full/closed
    - write(): awaitable form of emit() for async call sites
    - read(): async iterate over events until closed
    - close(): signal that no more events will be written
    """

    # Sentinel value to signal end of stream
    _SENTINEL = object()

    def __init__(self, maxsize: int | None = None):
        """
        Initialize Wire.

        Args:
            maxsize: Maximum queue size (0 = unlimited). Defaults to
                settings.event_queue_size.
        """
        if maxsize is None:
            maxsize = settings.event_queue_size
        self._queue: asyncio.Queue = asyncio.Queue(maxsize=maxsize)
        self._closed = False
        self._dropped = 0

    def emit(self, event: "BaseEvent") -> bool:
        """
        Put an event into the channel without waiting.

        Returns:
            bool: False when the event was dropped
        """
        if self._closed:
            self._dropped += 1
            return False
        try:
            self._queue.put_nowait(event)
        except asyncio.QueueFull:
            self._dropped += 1
            logger.debug("event_dropped", event_type=event.type, dropped=self._dropped)
            return False
        return True

    async def write(self, event: "BaseEvent") -> bool:
        return self.emit(event)

    def close(self) -> None:
        """Close the wire; readers stop once the queue is drained."""
        if self._closed:
            return
        self._closed = True
        try:
            self._queue.put_nowait(self._SENTINEL)
        except asyncio.QueueFull:
            # Readers notice the closed flag once they drain the queue
            pass

    async def read(self) -> AsyncIterator["BaseEvent"]:
        """
        Read events from the wire until closed.

        Yields:
            BaseEvent: Events in emission order
        """
        while True:
            if self._closed and self._queue.empty():
                break
            item = await self._queue.get()
            if item is self._SENTINEL:
                # Re-put sentinel for other readers (if any)
                try:
                    self._queue.put_nowait(self._SENTINEL)
                except asyncio.QueueFull:
                    pass
                break
            yield item

    def drain(self) -> list["BaseEvent"]:
        """Remove and return every queued event without waiting."""
        events = []
        while True:
            try:
                item = self._queue.get_nowait()
            except asyncio.QueueEmpty:
                break
            if item is self._SENTINEL:
                continue
            events.append(item)
        return events

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def dropped(self) -> int:
        """Number of events discarded because the wire was full or closed."""
        return self._dropped

    def __repr__(self) -> str:
        return f"Wire(closed={self._closed}, qsize={self._queue.qsize()}, dropped={self._dropped})"


__all__ = ["Wire"]
