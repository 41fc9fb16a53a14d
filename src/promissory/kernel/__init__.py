"""Kernel layer - pure abstractions for promissory."""

from promissory.kernel.env import Runtime, get_runtime, set_runtime
from promissory.kernel.errors import EmptyRaceError, PromiseError, PromiseRejected
from promissory.kernel.ports import SchedulerPort
from promissory.kernel.promise import Promise
from promissory.kernel.state import Outcome, State
from promissory.kernel.trace import Evidence, Trace

__all__ = [
    "Promise",
    "State",
    "Outcome",
    # Errors
    "PromiseError",
    "PromiseRejected",
    "EmptyRaceError",
    # Runtime & Ports
    "Runtime",
    "get_runtime",
    "set_runtime",
    "SchedulerPort",
    # Tracing
    "Evidence",
    "Trace",
]
