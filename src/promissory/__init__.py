from .combinators import all_, async_, race
from .kernel import (
    EmptyRaceError,
    Evidence,
    Outcome,
    Promise,
    PromiseError,
    PromiseRejected,
    Runtime,
    SchedulerPort,
    State,
    Trace,
    get_runtime,
    set_runtime,
)
from .runtime import AsyncioScheduler, RuntimeConfig, SerialScheduler, ThreadPoolScheduler

__all__ = [
    # Core
    "Promise",
    "State",
    "Outcome",
    # Combinators
    "race",
    "all_",
    "async_",
    # Errors
    "PromiseError",
    "PromiseRejected",
    "EmptyRaceError",
    # Runtime
    "Runtime",
    "RuntimeConfig",
    "get_runtime",
    "set_runtime",
    "SchedulerPort",
    "ThreadPoolScheduler",
    "SerialScheduler",
    "AsyncioScheduler",
    # Tracing
    "Trace",
    "Evidence",
]
