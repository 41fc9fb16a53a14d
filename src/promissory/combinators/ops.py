"""Combinator primitives: race, all_, async_."""

# Combinators only use the public Promise contract and satisfy:
#
# 1. Identity: p.then(lambda x: x) settles like p
#
# 2. Flattening: p.then(lambda x: Promise.fulfilled(f(x))) == p.then(f)
#    A handler returning a promise is adopted, never nested
#
# 3. Race picks one winner: race([a]) settles like a
#
# 4. All is total: all_(ps) always fulfills, one Outcome per input, in order


from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Sequence
from typing import Any, TypeVar

from promissory.kernel import Outcome, Promise
from promissory.kernel.env import Runtime
from promissory.kernel.errors import EmptyRaceError

logger = logging.getLogger(__name__)

S = TypeVar("S")
T = TypeVar("T")


def race(promises: Sequence[Promise[S]], runtime: Runtime | None = None) -> Promise[S]:
    """Settle with the outcome of whichever promise settles first.

    Semantics:
        - The first delivered outcome wins, value or reason alike
        - All later outcomes are discarded
        - An empty sequence rejects immediately with EmptyRaceError

    Args:
        promises: Promises to race.
        runtime: Runtime of the returned promise, defaults to the first input's.

    Returns:
        Promise[S]: A promise settled by the winner.
    """
    if not promises:
        return Promise.rejected(EmptyRaceError(), runtime=runtime)

    def executor(fulfill: Callable[[Any], None], reject: Callable[[Any], None]) -> None:
        lock = threading.Lock()
        done = False

        def settle_with(settle: Callable[[Any], None]) -> Callable[[Any], None]:
            def handler(payload: Any) -> None:
                nonlocal done
                with lock:
                    if done:
                        return
                    done = True
                settle(payload)

            return handler

        for promise in promises:
            promise.then(settle_with(fulfill), settle_with(reject))

    return Promise(executor, runtime=runtime or promises[0].runtime)


def all_(promises: Sequence[Promise[S]], runtime: Runtime | None = None) -> Promise[list[Outcome[S]]]:
    """Fulfill once every promise has settled, with one Outcome per input.

    Semantics:
        - A failing input does not abort the aggregate; its slot holds
          Outcome.Failure(reason)
        - Slots keep input order regardless of settle order
        - The returned promise never rejects
        - An empty sequence fulfills immediately with []

    Args:
        promises: Promises to wait for.
        runtime: Runtime of the returned promise, defaults to the first input's.

    Returns:
        Promise[list[Outcome[S]]]: A promise of the per-index outcomes.
    """
    if not promises:
        return Promise.fulfilled([], runtime=runtime)

    def executor(fulfill: Callable[[Any], None], reject: Callable[[Any], None]) -> None:
        _ = reject
        lock = threading.Lock()
        outcomes: list[Outcome[S] | None] = [None] * len(promises)
        finished = 0

        def record(index: int, outcome: Outcome[S]) -> None:
            nonlocal finished
            with lock:
                outcomes[index] = outcome
                finished += 1
                if finished != len(promises):
                    return
            logger.debug("all_() collected %d outcomes", len(promises))
            fulfill(list(outcomes))

        for index, promise in enumerate(promises):
            promise.then(
                lambda value, i=index: record(i, Outcome.Success(value)),
                lambda reason, i=index: record(i, Outcome.Failure(reason)),
            )

    return Promise(executor, runtime=runtime or promises[0].runtime)


def async_(work: Callable[[], T], runtime: Runtime | None = None) -> Promise[T]:
    """Run `work` on the background scheduler and return a promise of its result.

    The promise is fulfilled with the return value, or rejected with the
    exception `work` raised.
    """

    def executor(fulfill: Callable[[Any], None], reject: Callable[[Any], None]) -> None:
        _ = reject
        fulfill(work())

    return Promise(executor, runtime=runtime)
