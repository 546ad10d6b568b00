"""
Chat message model.

A ChatMessage is one conversation entry. Its role (who authored it) and its
kind (what it carries) are independent:

- TextKind: plain text in `content`
- ToolUseKind: tool calls requested by the model
- ToolResultKind: tool calls whose `function.arguments` hold the tool output
- ImageKind / ImageURLKind / PdfKind: binary or referenced attachments

Messages are frozen once built; conversation buffers only ever append them.
"""

from enum import Enum
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field


# ============================================================================
# Enums
# ============================================================================


class ChatRole(str, Enum):
    """Standard LLM message roles"""

    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"
    TOOL = "tool"


class ImageMime(str, Enum):
    """Supported image encodings"""

    JPEG = "jpeg"
    PNG = "png"
    GIF = "gif"
    WEBP = "webp"

    @property
    def mime_type(self) -> str:
        return f"image/{self.value}"


# ============================================================================
# Tool calls
# ============================================================================


class FunctionCall(BaseModel):
    """Function name and its JSON-encoded arguments."""

    model_config = ConfigDict(frozen=True)

    name: str
    arguments: str = "{}"


class ToolCall(BaseModel):
    """
    A tool invocation requested by the model.

    `id` correlates the request with its result and is unique within one
    model response.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    call_type: str = "function"
    function: FunctionCall

    @property
    def name(self) -> str:
        return self.function.name


# ============================================================================
# Message kinds
# ============================================================================


class TextKind(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: Literal["text"] = "text"


class ToolUseKind(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: Literal["tool_use"] = "tool_use"
    tool_calls: list[ToolCall]


class ToolResultKind(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: Literal["tool_result"] = "tool_result"
    tool_calls: list[ToolCall]


class ImageKind(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: Literal["image"] = "image"
    mime: ImageMime
    data: bytes


class ImageURLKind(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: Literal["image_url"] = "image_url"
    url: str


class PdfKind(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: Literal["pdf"] = "pdf"
    data: bytes


MessageKind = Annotated[
    Union[TextKind, ToolUseKind, ToolResultKind, ImageKind, ImageURLKind, PdfKind],
    Field(discriminator="type"),
]


# ============================================================================
# ChatMessage
# ============================================================================


class ChatMessage(BaseModel):
    """A single conversation turn."""

    model_config = ConfigDict(frozen=True)

    role: ChatRole
    content: str = ""
    kind: MessageKind = Field(default_factory=TextKind)

    @property
    def tool_calls(self) -> list[ToolCall]:
        """Tool calls carried by ToolUse/ToolResult messages, else empty."""
        if isinstance(self.kind, (ToolUseKind, ToolResultKind)):
            return list(self.kind.tool_calls)
        return []

    def is_text(self) -> bool:
        return isinstance(self.kind, TextKind)

    def is_tool_use(self) -> bool:
        return isinstance(self.kind, ToolUseKind)

    def is_tool_result(self) -> bool:
        return isinstance(self.kind, ToolResultKind)

    @classmethod
    def system(cls) -> "ChatMessageBuilder":
        return ChatMessageBuilder(ChatRole.SYSTEM)

    @classmethod
    def user(cls) -> "ChatMessageBuilder":
        return ChatMessageBuilder(ChatRole.USER)

    @classmethod
    def assistant(cls) -> "ChatMessageBuilder":
        return ChatMessageBuilder(ChatRole.ASSISTANT)

    @classmethod
    def tool(cls) -> "ChatMessageBuilder":
        return ChatMessageBuilder(ChatRole.TOOL)


class ChatMessageBuilder:
    """
    Fluent builder for ChatMessage.

    Examples:
        >>> ChatMessage.user().content("Add 2 and 3").build()
        >>> ChatMessage.assistant().tool_use(calls).build()
    """

    def __init__(self, role: ChatRole):
        self._role = role
        self._content = ""
        self._kind: Any = TextKind()

    def content(self, content: str) -> "ChatMessageBuilder":
        self._content = content
        return self

    def image(self, mime: ImageMime, data: bytes) -> "ChatMessageBuilder":
        self._kind = ImageKind(mime=mime, data=data)
        return self

    def image_url(self, url: str) -> "ChatMessageBuilder":
        self._kind = ImageURLKind(url=url)
        return self

    def pdf(self, data: bytes) -> "ChatMessageBuilder":
        self._kind = PdfKind(data=data)
        return self

    def tool_use(self, tool_calls: list[ToolCall]) -> "ChatMessageBuilder":
        self._kind = ToolUseKind(tool_calls=tool_calls)
        return self

    def tool_result(self, tool_calls: list[ToolCall]) -> "ChatMessageBuilder":
        self._kind = ToolResultKind(tool_calls=tool_calls)
        return self

    def build(self) -> ChatMessage:
        return ChatMessage(role=self._role, content=self._content, kind=self._kind)


# ============================================================================
# Structured output
# ============================================================================


class StructuredOutputFormat(BaseModel):
    """JSON schema the model is asked to follow for its final answer."""

    model_config = ConfigDict(populate_by_name=True)

    name: str
    description: str | None = None
    json_schema: dict[str, Any] | None = Field(default=None, alias="schema")
    strict: bool | None = None


__all__ = [
    "ChatRole",
    "ImageMime",
    "FunctionCall",
    "ToolCall",
    "TextKind",
    "ToolUseKind",
    "ToolResultKind",
    "ImageKind",
    "ImageURLKind",
    "PdfKind",
    "MessageKind",
    "ChatMessage",
    "ChatMessageBuilder",
    "StructuredOutputFormat",
]
