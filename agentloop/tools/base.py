"""Base abstractions for tools."""

from abc import ABC, abstractmethod
from typing import Any

from pydantic import BaseModel

from agentloop.domain import FunctionDefinition, ToolSchema


class Tool(ABC):
    """
    Common interface that every concrete tool must implement.

    `run` is synchronous and may block. It receives the parsed JSON
    arguments and returns a JSON-compatible value, or raises ToolError
    (ToolRuntimeError / ToolSerdeError).
    """

    name: str
    description: str = ""
    args_model: type[BaseModel] | None = None

    def args_schema(self) -> dict[str, Any]:
        """Return the JSON schema describing `run` arguments."""
        if self.args_model is None:
            return {"type": "object", "properties": {}}
        schema = self.args_model.model_json_schema()
        schema.pop("title", None)
        return schema

    @abstractmethod
    def run(self, args: Any) -> Any:
        """Execute the tool logic."""

    def to_schema(self) -> ToolSchema:
        """Construct the definition sent to the model."""
        return ToolSchema(
            function=FunctionDefinition(
                name=self.name,
                description=self.description,
                parameters=self.args_schema(),
            )
        )

    def to_openai_schema(self) -> dict:
        """Convert to OpenAI function calling format."""
        return self.to_schema().model_dump()

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"


__all__ = ["Tool"]
