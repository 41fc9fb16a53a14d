"""Error types for promise resolution."""

from __future__ import annotations


class PromiseError(Exception):
    """Base class for errors raised by promissory itself."""


class PromiseRejected(PromiseError):
    """Error raised when awaiting a promise rejected with a non-exception reason.

    This error preserves the raw rejection reason so callers can
    inspect it after catching.
    """

    def __init__(self, reason: object) -> None:
        self.reason = reason
        super().__init__(f"Promise rejected: {reason!r}")

    def __repr__(self) -> str:
        return f"PromiseRejected(reason={self.reason!r})"


class EmptyRaceError(PromiseError, ValueError):
    """Rejection reason of a race over an empty collection of promises."""

    def __init__(self) -> None:
        super().__init__("race() needs at least one promise")
