"""
Cancellation for agent execution.

The core has no wall-clock timeouts. A caller that needs hard cancellation
hands an AbortSignal to the executor; the executor checks it between turns
and races it against the in-flight LLM call.
"""

import asyncio
from typing import Awaitable, TypeVar

T = TypeVar("T")


class AbortSignal:
    """
    One-shot cancellation flag for an execution run.

    The executor polls is_aborted() before each turn and races wait()
    against the in-flight LLM call:

        signal = AbortSignal()
        run = asyncio.create_task(executor.execute(llm, task, config, abort_signal=signal))
        signal.abort("user pressed stop")
    """

    def __init__(self):
        self._event = asyncio.Event()
        self._reason: str | None = None

    def abort(self, reason: str = "aborted by caller"):
        self._reason = reason
        self._event.set()

    def is_aborted(self) -> bool:
        return self._event.is_set()

    async def wait(self):
        await self._event.wait()

    @property
    def reason(self) -> str | None:
        return self._reason

    def reset(self):
        """Re-arm the signal so it can guard another run."""
        self._event.clear()
        self._reason = None


async def race_abort(awaitable: Awaitable[T], signal: AbortSignal | None) -> T:
    """
    Await `awaitable` unless `signal` fires first.

    Raises:
        asyncio.CancelledError: the signal fired; the awaitable was cancelled
    """
    if signal is None:
        return await awaitable

    work = asyncio.ensure_future(awaitable)
    waiter = asyncio.ensure_future(signal.wait())
    try:
        done, _ = await asyncio.wait({work, waiter}, return_when=asyncio.FIRST_COMPLETED)
    finally:
        waiter.cancel()
        if not work.done():
            work.cancel()

    if work in done:
        return work.result()

    raise asyncio.CancelledError(signal.reason)


__all__ = ["AbortSignal", "race_abort"]
