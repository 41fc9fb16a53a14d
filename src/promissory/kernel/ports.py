"""Port protocols for promissory - pure abstractions."""

from __future__ import annotations

from collections.abc import Callable
from typing import Protocol

Work = Callable[[], None]


class SchedulerPort(Protocol):
    """
    Execution context port.

    Accepts a zero-argument unit of work and runs it off the calling
    context. Promises use one scheduler for executors and another one
    for delivering settlement to handlers.
    """

    def submit(self, work: Work) -> None:
        """Schedule `work` to run later. Must not run it inline."""
        ...

    def shutdown(self, wait: bool = True) -> None:
        """Stop accepting work and release owned resources."""
        ...
