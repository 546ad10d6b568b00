"""
Message conditions for reactive memory consumers.

A MessageCondition decides whether a MessageEvent (a stored message plus
the role name of its sender) is of interest:

    cond = MessageCondition.all_of(
        MessageCondition.role_is("user"),
        MessageCondition.contains("deploy"),
    )
    if cond.matches(event):
        ...
"""

import re
from dataclasses import dataclass
from typing import Callable

from agentloop.domain import ChatMessage


@dataclass(frozen=True)
class MessageEvent:
    """A message as seen by reactive memory consumers."""

    role: str
    msg: ChatMessage


class MessageCondition:
    def __init__(self, predicate: Callable[[MessageEvent], bool], label: str):
        self._predicate = predicate
        self.label = label

    def matches(self, event: MessageEvent) -> bool:
        return self._predicate(event)

    def __repr__(self) -> str:
        return f"MessageCondition({self.label})"

    @classmethod
    def any(cls) -> "MessageCondition":
        return cls(lambda e: True, "any")

    @classmethod
    def eq(cls, text: str) -> "MessageCondition":
        return cls(lambda e: e.msg.content == text, f"eq={text!r}")

    @classmethod
    def contains(cls, text: str) -> "MessageCondition":
        return cls(lambda e: text in e.msg.content, f"contains={text!r}")

    @classmethod
    def not_contains(cls, text: str) -> "MessageCondition":
        return cls(lambda e: text not in e.msg.content, f"not_contains={text!r}")

    @classmethod
    def role_is(cls, role: str) -> "MessageCondition":
        return cls(lambda e: e.role == role, f"role_is={role!r}")

    @classmethod
    def role_not(cls, role: str) -> "MessageCondition":
        return cls(lambda e: e.role != role, f"role_not={role!r}")

    @classmethod
    def len_gt(cls, length: int) -> "MessageCondition":
        return cls(lambda e: len(e.msg.content) > length, f"len_gt={length}")

    @classmethod
    def custom(cls, func: Callable[[ChatMessage], bool]) -> "MessageCondition":
        return cls(lambda e: func(e.msg), "custom")

    @classmethod
    def empty(cls) -> "MessageCondition":
        return cls(lambda e: e.msg.content == "", "empty")

    @classmethod
    def all_of(cls, *conditions: "MessageCondition") -> "MessageCondition":
        return cls(
            lambda e: all(c.matches(e) for c in conditions),
            "all_of(" + ", ".join(c.label for c in conditions) + ")",
        )

    @classmethod
    def any_of(cls, *conditions: "MessageCondition") -> "MessageCondition":
        return cls(
            lambda e: any(c.matches(e) for c in conditions),
            "any_of(" + ", ".join(c.label for c in conditions) + ")",
        )

    @classmethod
    def regex(cls, pattern: str) -> "MessageCondition":
        """Match content against `pattern`; an invalid pattern never matches."""
        try:
            compiled = re.compile(pattern)
        except re.error:
            return cls(lambda e: False, f"regex={pattern!r} (invalid)")
        return cls(lambda e: compiled.search(e.msg.content) is not None, f"regex={pattern!r}")


__all__ = ["MessageEvent", "MessageCondition"]
