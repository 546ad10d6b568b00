"""
Domain models for agentloop: messages, tool results, tasks and events.
"""

from .events import (
    BaseEvent,
    Event,
    EventType,
    NewTask,
    TaskComplete,
    TaskError,
    TaskStarted,
    ToolCallCompleted,
    ToolCallFailed,
    ToolCallRequested,
    TurnCompleted,
    TurnStarted,
    parse_event,
)
from .messages import (
    ChatMessage,
    ChatMessageBuilder,
    ChatRole,
    FunctionCall,
    ImageKind,
    ImageMime,
    ImageURLKind,
    MessageKind,
    PdfKind,
    StructuredOutputFormat,
    TextKind,
    ToolCall,
    ToolResultKind,
    ToolUseKind,
)
from .task import Task
from .tools import FunctionDefinition, ToolCallResult, ToolSchema

__all__ = [
    # Messages
    "ChatMessage",
    "ChatMessageBuilder",
    "ChatRole",
    "FunctionCall",
    "ImageKind",
    "ImageMime",
    "ImageURLKind",
    "MessageKind",
    "PdfKind",
    "StructuredOutputFormat",
    "TextKind",
    "ToolCall",
    "ToolResultKind",
    "ToolUseKind",
    # Tools
    "FunctionDefinition",
    "ToolCallResult",
    "ToolSchema",
    # Task
    "Task",
    # Events
    "BaseEvent",
    "Event",
    "EventType",
    "NewTask",
    "TaskComplete",
    "TaskError",
    "TaskStarted",
    "ToolCallCompleted",
    "ToolCallFailed",
    "ToolCallRequested",
    "TurnCompleted",
    "TurnStarted",
    "parse_event",
]
