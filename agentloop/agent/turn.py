"""
Outcome of a single turn.

Every turn returns exactly one of:

- Complete(output): terminal, the model produced its final answer
- Continue(output | None): tools ran, call the model again
- TurnError(message): recoverable, the loop logs it and moves on
- Fatal(reason): unrecoverable, the loop aborts
"""

from dataclasses import dataclass
from typing import Generic, TypeVar, Union

T = TypeVar("T")


@dataclass(frozen=True)
class Complete(Generic[T]):
    output: T


@dataclass(frozen=True)
class Continue(Generic[T]):
    output: T | None = None


@dataclass(frozen=True)
class TurnError:
    message: str


@dataclass(frozen=True)
class Fatal:
    reason: str


TurnResult = Union[Complete[T], Continue[T], TurnError, Fatal]


__all__ = ["Complete", "Continue", "TurnError", "Fatal", "TurnResult"]
