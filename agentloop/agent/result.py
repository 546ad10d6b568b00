from typing import Any

from pydantic import BaseModel


class AgentRunResult(BaseModel):
    """Outcome of Agent.run(), success or failure."""

    success: bool
    output: Any = None
    error_message: str | None = None
    metadata: dict[str, Any] | None = None

    @classmethod
    def ok(cls, output: Any, metadata: dict[str, Any] | None = None) -> "AgentRunResult":
        return cls(success=True, output=output, metadata=metadata)

    @classmethod
    def failure(cls, error_message: str, metadata: dict[str, Any] | None = None) -> "AgentRunResult":
        return cls(success=False, error_message=error_message, metadata=metadata)


__all__ = ["AgentRunResult"]
