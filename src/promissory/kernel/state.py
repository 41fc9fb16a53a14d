"""Promise states and settled outcomes - pure and dependency-free."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Generic, Literal, TypeVar

T = TypeVar("T")


class State(Enum):
    """
    Resolution state of a promise.

    States:
    - pending: not settled yet, handlers are queued
    - fulfilled: settled with success, a result is available
    - rejected: settled with failure, a rejection reason is available

    A promise moves out of pending at most once and never returns to it.
    """

    PENDING = "pending"
    FULFILLED = "fulfilled"
    REJECTED = "rejected"


@dataclass(frozen=True)
class Outcome(Generic[T]):
    """
    The settled result of a promise: either a success value or a failure reason.

    Kinds:
    - success: the promise was fulfilled with `value`
    - failure: the promise was rejected with `reason`
    """

    kind: Literal["success", "failure"]
    value: T | None = None
    reason: Any | None = None

    @staticmethod
    def Success(value: Any) -> Outcome[Any]:
        return Outcome(kind="success", value=value)

    @staticmethod
    def Failure(reason: Any) -> Outcome[Any]:
        return Outcome(kind="failure", reason=reason)

    @property
    def succeeded(self) -> bool:
        return self.kind == "success"

    @property
    def failed(self) -> bool:
        return self.kind == "failure"

    @property
    def state(self) -> State:
        """The promise state this outcome settles into."""
        return State.FULFILLED if self.succeeded else State.REJECTED
