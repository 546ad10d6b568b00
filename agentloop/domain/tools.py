from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ToolCallResult(BaseModel):
    """Outcome of resolving and running one ToolCall."""

    model_config = ConfigDict(frozen=True)

    tool_name: str
    success: bool
    arguments: Any = None  # parsed JSON arguments, None when unparseable
    result: Any = None  # tool output, or {"error": ...} on failure

    @property
    def error(self) -> str | None:
        if self.success:
            return None
        if isinstance(self.result, dict) and "error" in self.result:
            return str(self.result["error"])
        return str(self.result)


class FunctionDefinition(BaseModel):
    name: str
    description: str
    parameters: dict[str, Any] = Field(default_factory=lambda: {"type": "object", "properties": {}})


class ToolSchema(BaseModel):
    """Tool definition sent to the model (OpenAI function calling format)."""

    type: str = "function"
    function: FunctionDefinition
