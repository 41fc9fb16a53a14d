"""Runtime module - default scheduler implementations for promissory."""

from promissory.runtime.config import RuntimeConfig
from promissory.runtime.schedulers import AsyncioScheduler, SerialScheduler, ThreadPoolScheduler

__all__ = [
    "RuntimeConfig",
    "ThreadPoolScheduler",
    "SerialScheduler",
    "AsyncioScheduler",
]
