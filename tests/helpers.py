"""
Test doubles shared across test modules.
"""

from agentloop.domain import FunctionCall, ToolCall
from agentloop.llm import ChatResponse, LLMProvider


class ScriptedLLM(LLMProvider):
    """
    LLM provider that replays a fixed list of responses.

    Entries that are exceptions are raised instead of returned. Every call
    is recorded as (messages, tools, schema).
    """

    def __init__(self, responses):
        self.responses = list(responses)
        self.calls = []

    async def chat_with_tools(self, messages, tools=None, schema=None):
        self.calls.append((list(messages), tools, schema))
        if not self.responses:
            raise RuntimeError("script exhausted")
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


def make_call(call_id: str, name: str, arguments: str = "{}") -> ToolCall:
    return ToolCall(id=call_id, function=FunctionCall(name=name, arguments=arguments))


def tool_response(*calls: ToolCall, content: str | None = None) -> ChatResponse:
    return ChatResponse(content=content, calls=list(calls))


def text_response(content: str) -> ChatResponse:
    return ChatResponse(content=content)
