"""Scheduler implementations for the SchedulerPort protocol."""

from __future__ import annotations

import asyncio
import functools
import logging
from concurrent.futures import ThreadPoolExecutor

from promissory.kernel.ports import Work

logger = logging.getLogger(__name__)


def _run_logged(work: Work) -> None:
    """Run one unit of work, logging instead of losing its exception."""
    try:
        work()
    except Exception:
        logger.exception("Scheduled work %r failed", work)


class ThreadPoolScheduler:
    """Scheduler backed by a pool of worker threads.

    Work items may run concurrently and complete in any order.
    """

    def __init__(self, max_workers: int = 4, thread_name_prefix: str = "promissory") -> None:
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers,
            thread_name_prefix=thread_name_prefix,
        )

    def submit(self, work: Work) -> None:
        self._executor.submit(_run_logged, work)

    def shutdown(self, wait: bool = True) -> None:
        self._executor.shutdown(wait=wait)


class SerialScheduler(ThreadPoolScheduler):
    """Scheduler with a single worker thread.

    Work runs one item at a time in submission order, which makes it the
    natural foreground context for delivering promise handlers.
    """

    def __init__(self, thread_name_prefix: str = "promissory-foreground") -> None:
        super().__init__(max_workers=1, thread_name_prefix=thread_name_prefix)


class AsyncioScheduler:
    """Scheduler that runs work as callbacks on an asyncio event loop.

    Safe to submit to from any thread. The loop is owned by the caller,
    so shutdown() does not close it.
    """

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        self._loop = loop or asyncio.get_running_loop()

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        return self._loop

    def submit(self, work: Work) -> None:
        self._loop.call_soon_threadsafe(functools.partial(_run_logged, work))

    def shutdown(self, wait: bool = True) -> None:
        _ = wait
