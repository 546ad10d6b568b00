"""
ReActExecutor - reason/act loop.

Same turn state machine as DefaultExecutor. The text that accompanies each
batch of tool calls, and any reasoning content the provider exposes, is kept
as an ordered list of thoughts on the final AgentOutput.
"""

from agentloop.agent.executor import TurnExecutor
from agentloop.agent.output import AgentOutput
from agentloop.domain import ToolCallResult
from agentloop.llm import ChatResponse


class ReActExecutor(TurnExecutor):
    def build_partial(
        self, text: str, response: ChatResponse, results: list[ToolCallResult]
    ) -> AgentOutput:
        return AgentOutput(
            response=text,
            tool_calls=results,
            thoughts=self._thoughts(text, response),
        )

    def build_final(self, text: str, response: ChatResponse) -> AgentOutput:
        # The final text is the answer, only provider reasoning counts as a thought
        thinking = response.thinking()
        return AgentOutput(response=text, thoughts=[thinking] if thinking else [])

    @staticmethod
    def _thoughts(text: str, response: ChatResponse) -> list[str]:
        thoughts = []
        thinking = response.thinking()
        if thinking:
            thoughts.append(thinking)
        if text:
            thoughts.append(text)
        return thoughts


__all__ = ["ReActExecutor"]
