"""
Executor output and structured-output extraction.
"""

import json
from typing import Any, Literal, TypeVar

from pydantic import BaseModel, Field, ValidationError

from agentloop.domain import ToolCallResult
from agentloop.exceptions import AgentOutputError

M = TypeVar("M", bound=BaseModel)


class AgentOutput(BaseModel):
    """
    Aggregated result of an execution run.

    `response` is the text of the last turn that produced one; `tool_calls`
    holds every tool result of the run in execution order.
    """

    response: str = ""
    tool_calls: list[ToolCallResult] = Field(default_factory=list)
    thoughts: list[str] = Field(default_factory=list)
    termination_reason: Literal["complete", "max_turns"] | None = None

    @property
    def exhausted(self) -> bool:
        """True when the run stopped on the turn budget rather than an answer."""
        return self.termination_reason == "max_turns"

    def parse(self, model: type[M]) -> M:
        """Parse `response` as JSON into `model`."""
        try:
            return model.model_validate_json(self.response)
        except ValidationError as e:
            raise AgentOutputError(str(e)) from e

    @classmethod
    def extract_agent_output(cls, value: Any, model: type[M]) -> M:
        """
        Extract a typed result from a serialized AgentOutput.

        Args:
            value: AgentOutput, its dict form, or its JSON string
            model: Pydantic model the final response must match

        Raises:
            AgentOutputError: value is not an AgentOutput or the response
                does not match `model`
        """
        try:
            if isinstance(value, AgentOutput):
                output = value
            elif isinstance(value, str):
                output = cls.model_validate(json.loads(value))
            else:
                output = cls.model_validate(value)
        except (ValidationError, json.JSONDecodeError, TypeError) as e:
            raise AgentOutputError(str(e)) from e
        return output.parse(model)


__all__ = ["AgentOutput"]
