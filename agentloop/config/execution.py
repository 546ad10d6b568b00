"""
Runtime configuration passed explicitly into every executor call.

- ExecutionConfig: turn budget and loop policies
- AgentConfig: agent identity, system prompt and structured output schema
"""

from uuid import UUID, uuid4

from pydantic import BaseModel, Field

from agentloop.config.settings import settings
from agentloop.domain.messages import StructuredOutputFormat


class ExecutionConfig(BaseModel):
    """Loop governance for a single execution run."""

    max_turns: int = Field(
        default_factory=lambda: settings.default_max_turns,
        ge=1,
        description="Maximum number of turns before the loop is stopped",
    )
    strict_max_turns: bool = Field(
        default=False,
        description=(
            "Raise MaxTurnsExceededError even when partial output exists "
            "(the partial output is attached to the error)"
        ),
    )
    summarize_on_overflow: bool = Field(
        default=True,
        description="Collapse memory through the LLM when the provider flags needs_summary",
    )
    reject_duplicate_tools: bool = Field(
        default=False,
        description="Reject tool lists containing two tools with the same name",
    )


class AgentConfig(BaseModel):
    """Identity and prompting configuration of an agent."""

    id: UUID = Field(default_factory=uuid4)
    name: str
    description: str = ""
    system_prompt: str | None = None
    output_schema: StructuredOutputFormat | None = None

    @property
    def instructions(self) -> str:
        """System prompt sent to the model, falling back to the description."""
        return self.system_prompt or self.description


__all__ = ["ExecutionConfig", "AgentConfig"]
