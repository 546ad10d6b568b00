"""
Event protocol for lifecycle notifications.

Events are written to a Wire by the executor and read by external observers
(UIs, loggers). The `type` field discriminates the variants and, together with
the field names below, forms the wire contract for downstream consumers.
"""

import json
from datetime import datetime
from enum import Enum
from typing import Annotated, Any, Literal, Union
from uuid import UUID

from pydantic import BaseModel, Field, TypeAdapter


class EventType(str, Enum):
    """Event types"""

    # Task lifecycle
    NEW_TASK = "new_task"
    TASK_STARTED = "task_started"
    TASK_COMPLETE = "task_complete"
    TASK_ERROR = "task_error"

    # Turn lifecycle
    TURN_STARTED = "turn_started"
    TURN_COMPLETED = "turn_completed"

    # Tool execution
    TOOL_CALL_REQUESTED = "tool_call_requested"
    TOOL_CALL_COMPLETED = "tool_call_completed"
    TOOL_CALL_FAILED = "tool_call_failed"


class BaseEvent(BaseModel):
    timestamp: datetime = Field(default_factory=datetime.now)

    def to_sse(self) -> str:
        """
        Convert to Server-Sent Events format.

        Returns:
            str: SSE-formatted string ready to send to client
        """
        data = self.model_dump(mode="json")
        return f"data: {json.dumps(data)}\n\n"


class NewTask(BaseEvent):
    type: Literal["new_task"] = "new_task"
    sub_id: UUID
    agent_id: UUID | None = None
    prompt: str


class TaskStarted(BaseEvent):
    type: Literal["task_started"] = "task_started"
    sub_id: UUID
    agent_id: UUID | None = None
    task_description: str


class TaskComplete(BaseEvent):
    type: Literal["task_complete"] = "task_complete"
    sub_id: UUID
    result: Any = None


class TaskError(BaseEvent):
    type: Literal["task_error"] = "task_error"
    sub_id: UUID
    error: str


class TurnStarted(BaseEvent):
    type: Literal["turn_started"] = "turn_started"
    turn_number: int
    max_turns: int


class TurnCompleted(BaseEvent):
    type: Literal["turn_completed"] = "turn_completed"
    turn_number: int
    final_turn: bool


class ToolCallRequested(BaseEvent):
    type: Literal["tool_call_requested"] = "tool_call_requested"
    id: str
    tool_name: str
    arguments: str


class ToolCallCompleted(BaseEvent):
    type: Literal["tool_call_completed"] = "tool_call_completed"
    id: str
    tool_name: str
    result: Any = None


class ToolCallFailed(BaseEvent):
    type: Literal["tool_call_failed"] = "tool_call_failed"
    id: str
    tool_name: str
    error: str


Event = Annotated[
    Union[
        NewTask,
        TaskStarted,
        TaskComplete,
        TaskError,
        TurnStarted,
        TurnCompleted,
        ToolCallRequested,
        ToolCallCompleted,
        ToolCallFailed,
    ],
    Field(discriminator="type"),
]

_event_adapter: TypeAdapter = TypeAdapter(Event)


def parse_event(data: dict[str, Any] | str) -> BaseEvent:
    """Deserialize an event from its JSON (or dict) representation."""
    if isinstance(data, str):
        return _event_adapter.validate_json(data)
    return _event_adapter.validate_python(data)


__all__ = [
    "EventType",
    "BaseEvent",
    "NewTask",
    "TaskStarted",
    "TaskComplete",
    "TaskError",
    "TurnStarted",
    "TurnCompleted",
    "ToolCallRequested",
    "ToolCallCompleted",
    "ToolCallFailed",
    "Event",
    "parse_event",
]
