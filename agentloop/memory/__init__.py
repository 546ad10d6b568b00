from agentloop.memory.base import MemoryProvider, MemoryType
from agentloop.memory.conditions import MessageCondition, MessageEvent
from agentloop.memory.shared import SharedMemory
from agentloop.memory.sliding_window import SlidingWindowMemory, TrimStrategy

__all__ = [
    "MemoryProvider",
    "MemoryType",
    "MessageCondition",
    "MessageEvent",
    "SharedMemory",
    "SlidingWindowMemory",
    "TrimStrategy",
]
