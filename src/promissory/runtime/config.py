"""Runtime configuration."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

from promissory.kernel.env import Runtime
from promissory.kernel.ports import SchedulerPort
from promissory.kernel.trace import Trace
from promissory.runtime.schedulers import SerialScheduler, ThreadPoolScheduler


class RuntimeConfig(BaseModel):
    """Settings for building a promise Runtime.

    Attributes:
        max_workers: Size of the background thread pool
        thread_name_prefix: Prefix for worker thread names
        foreground: "serial" delivers handlers one at a time in order,
            "thread_pool" delivers them concurrently
        trace: Record lifecycle events in a Trace
    """

    max_workers: int = Field(default=4, gt=0)
    thread_name_prefix: str = "promissory"
    foreground: Literal["serial", "thread_pool"] = "serial"
    trace: bool = False

    def build(self) -> Runtime:
        background = ThreadPoolScheduler(
            max_workers=self.max_workers,
            thread_name_prefix=f"{self.thread_name_prefix}-background",
        )
        foreground: SchedulerPort
        if self.foreground == "serial":
            foreground = SerialScheduler(thread_name_prefix=f"{self.thread_name_prefix}-foreground")
        else:
            foreground = ThreadPoolScheduler(
                max_workers=self.max_workers,
                thread_name_prefix=f"{self.thread_name_prefix}-foreground",
            )
        return Runtime(
            background=background,
            foreground=foreground,
            trace=Trace() if self.trace else None,
        )
