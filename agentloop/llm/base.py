"""
LLM abstraction layer - pure chat interface.

Responsibilities:
- Define the chat contract the executors consume
- Standardize responses to text + tool calls

Does NOT handle:
- Tool loop logic
- Event emission
- Vendor HTTP protocols (implemented by adapters outside this package)
"""

from abc import ABC, abstractmethod

from pydantic import BaseModel, ConfigDict, Field

from agentloop.domain import ChatMessage, StructuredOutputFormat, ToolCall, ToolSchema


class ChatResponse(BaseModel):
    """
    Standardized model response.

    Adapters translate their vendor payload into this shape.
    """

    model_config = ConfigDict(frozen=True)

    content: str | None = Field(default=None, description="Text content")
    calls: list[ToolCall] | None = Field(
        default=None, description="Tool calls requested by the model"
    )
    thinking_content: str | None = Field(
        default=None, description="Reasoning content, when the provider exposes it"
    )

    def text(self) -> str | None:
        return self.content

    def tool_calls(self) -> list[ToolCall] | None:
        return self.calls

    def thinking(self) -> str | None:
        return self.thinking_content


class LLMProvider(ABC):
    """
    Chat provider interface.

    Implementations only need chat_with_tools(); chat() delegates to it
    without tools.
    """

    @abstractmethod
    async def chat_with_tools(
        self,
        messages: list[ChatMessage],
        tools: list[ToolSchema] | None = None,
        schema: StructuredOutputFormat | None = None,
    ) -> ChatResponse:
        """
        Send the conversation with tool definitions attached.

        Args:
            messages: Conversation history, oldest first
            tools: Tool definitions the model may call
            schema: Optional structured output format for the final answer

        Returns:
            ChatResponse: text and/or tool calls

        Raises:
            Exception: Any transport or provider failure; executors wrap it
                in LLMError
        """

    async def chat(
        self,
        messages: list[ChatMessage],
        schema: StructuredOutputFormat | None = None,
    ) -> ChatResponse:
        """Send the conversation without tools."""
        return await self.chat_with_tools(messages, None, schema)

    async def summarize_history(self, messages: list[ChatMessage]) -> str:
        """Summarize a conversation into a short paragraph."""
        transcript = "\n".join(f"{m.role.value}: {m.content}" for m in messages)
        request = [
            ChatMessage.user().content(f"Summarize in 2-3 sentences:\n{transcript}").build()
        ]
        response = await self.chat(request)
        text = response.text()
        if text is None:
            raise ValueError("no text in summary response")
        return text


__all__ = ["ChatResponse", "LLMProvider"]
