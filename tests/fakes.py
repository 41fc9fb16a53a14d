from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import Any

from promissory import Promise, Runtime, Trace
from promissory.kernel.ports import Work


@dataclass
class ManualScheduler:
    """Scheduler that only runs work when the test asks it to."""

    queue: list[Work] = field(default_factory=list)
    closed: bool = False

    def submit(self, work: Work) -> None:
        self.queue.append(work)

    def shutdown(self, wait: bool = True) -> None:
        _ = wait
        self.closed = True

    def run_all(self) -> int:
        """Run queued work, including work queued while running, until idle."""
        ran = 0
        while self.queue:
            work = self.queue.pop(0)
            work()
            ran += 1
        return ran


@dataclass
class FlakyScheduler(ManualScheduler):
    """Manual scheduler whose first `failures` submissions raise."""

    failures: int = 1

    def submit(self, work: Work) -> None:
        if self.failures > 0:
            self.failures -= 1
            raise RuntimeError("cannot schedule new futures after shutdown")
        super().submit(work)


@dataclass
class ManualRuntime(Runtime):
    background: ManualScheduler = field(default_factory=ManualScheduler)
    foreground: ManualScheduler = field(default_factory=ManualScheduler)
    trace: Trace | None = field(default_factory=Trace)

    def run_all(self) -> None:
        """Drain both schedulers until neither has work left."""
        while self.background.queue or self.foreground.queue:
            self.background.run_all()
            self.foreground.run_all()


def wait_settled(promise: Promise[Any], timeout: float = 5.0) -> Promise[Any]:
    """Block the test until `promise` settles, then return it."""
    settled = threading.Event()
    promise.then(lambda _: settled.set(), lambda _: settled.set())
    if not settled.wait(timeout):
        raise AssertionError(f"{promise!r} did not settle within {timeout}s")
    return promise
