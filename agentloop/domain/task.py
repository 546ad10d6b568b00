"""
Task submitted to an agent.

The submission_id is the correlation key event consumers use to match
TaskComplete/TaskError events with the NewTask that started them.
"""

from typing import Any
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class Task(BaseModel):
    prompt: str
    submission_id: UUID = Field(default_factory=uuid4)
    completed: bool = False
    result: Any = None
    agent_id: UUID | None = None

    def complete(self, result: Any) -> "Task":
        """Return a terminal copy of this task carrying its result."""
        return self.model_copy(update={"completed": True, "result": result})


__all__ = ["Task"]
