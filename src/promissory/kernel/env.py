"""Runtime environment for promissory - scheduler aggregation."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass

from promissory.kernel.ports import SchedulerPort
from promissory.kernel.trace import Trace

logger = logging.getLogger(__name__)


@dataclass
class Runtime:
    """Runtime aggregation - combines the execution contexts a promise uses.

    Attributes:
        background: Runs executors and async_() work
        foreground: Delivers settlement to then() handlers
        trace: Optional lifecycle trace
    """

    background: SchedulerPort
    foreground: SchedulerPort
    trace: Trace | None = None

    def shutdown(self, wait: bool = True) -> None:
        """Shut down both schedulers (once each if they are shared)."""
        self.background.shutdown(wait=wait)
        if self.foreground is not self.background:
            self.foreground.shutdown(wait=wait)


_default_runtime: Runtime | None = None
_default_lock = threading.Lock()


def get_runtime() -> Runtime:
    """Return the process-wide default runtime, building it on first use."""
    global _default_runtime
    with _default_lock:
        if _default_runtime is None:
            # Deferred import: the kernel stays free of runtime implementations
            from promissory.runtime.config import RuntimeConfig

            _default_runtime = RuntimeConfig().build()
            logger.debug("Built default promise runtime")
        return _default_runtime


def set_runtime(runtime: Runtime | None) -> Runtime | None:
    """Replace the default runtime and return the previous one.

    Passing None resets it, so the next get_runtime() builds a fresh one.
    The previous runtime is not shut down.
    """
    global _default_runtime
    with _default_lock:
        previous = _default_runtime
        _default_runtime = runtime
    return previous
