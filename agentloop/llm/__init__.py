from agentloop.llm.base import ChatResponse, LLMProvider

__all__ = ["ChatResponse", "LLMProvider"]
