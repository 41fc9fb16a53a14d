"""Runtime trace infrastructure - separate from promise state.

This module captures promise lifecycle events for debugging.
Trace is runtime infrastructure - it never influences how a promise settles.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any


@dataclass(frozen=True)
class Evidence:
    """Evidence represents one lifecycle event of a promise.

    Actions:
    - created: a promise was constructed
    - adopted: a promise started following another promise's outcome
    - fulfilled / rejected: a promise settled
    - executor_error: an executor raised
    - handler_error: a then() handler raised
    - ignored_settle: fulfill/reject was called after resolution began
    """

    action: str
    id: int = 0
    promise_id: int | None = None
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))
    info: dict[str, Any] = field(default_factory=dict)


class Trace:
    """Runtime trace context for capturing promise events.

    Promises settle on worker threads, so recording is guarded by a lock.

    Performance guarantees:
    - Trace disabled → single flag check overhead
    - Evidence append is O(1)
    """

    def __init__(self, enabled: bool = True) -> None:
        self.enabled = enabled
        self._events: list[Evidence] = []
        self._next_id: int = 0
        self._lock = threading.Lock()

    def record(
        self,
        action: str,
        promise_id: int | None = None,
        info: dict[str, Any] | None = None,
    ) -> int | None:
        """Record an evidence event.

        Args:
            action: What happened (e.g., "fulfilled", "handler_error")
            promise_id: Id of the promise the event belongs to
            info: Additional context

        Returns:
            Event ID, or None if tracing disabled
        """
        if not self.enabled:
            return None

        with self._lock:
            event_id = self._next_id
            self._next_id += 1
            self._events.append(
                Evidence(
                    action=action,
                    id=event_id,
                    promise_id=promise_id,
                    timestamp=datetime.now(UTC),
                    info=info or {},
                )
            )
        return event_id

    def events(self, promise_id: int | None = None, action: str | None = None) -> list[Evidence]:
        """Get recorded events, optionally filtered by promise and action."""
        with self._lock:
            snapshot = list(self._events)
        return [
            ev
            for ev in snapshot
            if (promise_id is None or ev.promise_id == promise_id)
            and (action is None or ev.action == action)
        ]

    def __len__(self) -> int:
        with self._lock:
            return len(self._events)

    def clear(self) -> None:
        """Clear all events (for reuse)."""
        with self._lock:
            self._events.clear()
            self._next_id = 0
