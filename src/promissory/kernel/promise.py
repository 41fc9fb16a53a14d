"""Promise - single-assignment container for a value not known yet."""

from __future__ import annotations

import asyncio
import functools
import itertools
import logging
import threading
from collections.abc import Callable, Generator, Sequence
from typing import Any, Generic, TypeVar

from promissory.kernel.env import Runtime, get_runtime
from promissory.kernel.errors import PromiseRejected
from promissory.kernel.state import Outcome, State

logger = logging.getLogger(__name__)

T = TypeVar("T")
S = TypeVar("S")

Fulfill = Callable[[Any], None]
Reject = Callable[[Any], None]
Executor = Callable[[Fulfill, Reject], None]
Handler = Callable[[Any], None]

_ids = itertools.count(1)


class Promise(Generic[T]):
    """A proxy for a value not necessarily known when the promise is created.

    A promise is pending until it settles exactly once, either fulfilled with
    a result or rejected with a reason. Handlers attached with then(),
    success() and failure() always run on the runtime's foreground scheduler,
    whether they were attached before or after settlement, and each call
    returns a new promise resolved by the handler's outcome.

    Resolution policy:
        Once fulfill() or reject() has been called (or the promise started
        adopting another promise), later calls are ignored. They are logged
        at DEBUG and recorded as "ignored_settle" in the trace, and never
        re-fire handlers.

    Example:
        >>> p = Promise(lambda fulfill, reject: fulfill(41))
        >>> p.success(lambda x: x + 1)  # eventually fulfilled with 42
    """

    def __init__(self, executor: Executor | None = None, runtime: Runtime | None = None) -> None:
        """Create a pending promise.

        Args:
            executor: Called once as executor(fulfill, reject) on the
                background scheduler. If it raises before settling, the
                promise is rejected with the raised exception. Without an
                executor the promise is settled by calling fulfill()/reject().
            runtime: Schedulers and trace to use, defaults to get_runtime()
        """
        self.id = next(_ids)
        self._runtime = runtime or get_runtime()
        self._lock = threading.Lock()
        self._state = State.PENDING
        self._outcome: Outcome[T] | None = None
        self._resolving = False
        self._on_success: list[Handler] = []
        self._on_failure: list[Handler] = []

        self._record("created")
        if executor is not None:
            self._runtime.background.submit(functools.partial(self._run_executor, executor))

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def fulfilled(cls, value: Any, runtime: Runtime | None = None) -> Promise[Any]:
        """Return a promise already fulfilled with `value`.

        If `value` is a promise it is returned unchanged.
        """
        if isinstance(value, Promise):
            return value
        promise: Promise[Any] = cls(runtime=runtime)
        promise._resolving = True
        promise._settle(Outcome.Success(value))
        return promise

    @classmethod
    def rejected(cls, reason: Any, runtime: Runtime | None = None) -> Promise[Any]:
        """Return a promise already rejected with `reason`."""
        promise: Promise[Any] = cls(runtime=runtime)
        promise._resolving = True
        promise._settle(Outcome.Failure(reason))
        return promise

    @staticmethod
    def race(promises: Sequence[Promise[S]]) -> Promise[S]:
        """Shortcut for promissory.combinators.race()."""
        from promissory.combinators.ops import race

        return race(promises)

    @staticmethod
    def all(promises: Sequence[Promise[S]]) -> Promise[list[Outcome[S]]]:
        """Shortcut for promissory.combinators.all_()."""
        from promissory.combinators.ops import all_

        return all_(promises)

    # ------------------------------------------------------------------
    # Observation
    # ------------------------------------------------------------------

    @property
    def state(self) -> State:
        return self._state

    @property
    def result(self) -> T | None:
        """The fulfillment value, or None unless the promise is fulfilled."""
        outcome = self._outcome
        if outcome is None or not outcome.succeeded:
            return None
        return outcome.value

    @property
    def reason(self) -> Any | None:
        """The rejection reason, or None unless the promise is rejected."""
        outcome = self._outcome
        if outcome is None or not outcome.failed:
            return None
        return outcome.reason

    @property
    def outcome(self) -> Outcome[T] | None:
        """The settled outcome, or None while pending."""
        return self._outcome

    @property
    def runtime(self) -> Runtime:
        return self._runtime

    @property
    def is_pending(self) -> bool:
        return self._state is State.PENDING

    @property
    def is_fulfilled(self) -> bool:
        return self._state is State.FULFILLED

    @property
    def is_rejected(self) -> bool:
        return self._state is State.REJECTED

    # ------------------------------------------------------------------
    # Settling
    # ------------------------------------------------------------------

    def fulfill(self, value: Any) -> None:
        """Fulfill the promise with `value`.

        A promise value is not stored: this promise adopts its eventual
        outcome instead, so a consumer never observes a promise as a result.
        """
        if not self._claim("fulfill"):
            return
        self._resolve(value)

    def reject(self, reason: Any) -> None:
        """Reject the promise with `reason`, as given."""
        if not self._claim("reject"):
            return
        self._settle(Outcome.Failure(reason))

    def _claim(self, operation: str) -> bool:
        with self._lock:
            if not self._resolving:
                self._resolving = True
                return True
        logger.debug("Ignoring %s() on promise %d: resolution already started", operation, self.id)
        self._record("ignored_settle", {"operation": operation})
        return False

    def _resolve(self, value: Any) -> None:
        if value is self:
            self._settle(Outcome.Failure(TypeError("A promise cannot be resolved with itself")))
            return
        if isinstance(value, Promise):
            self._record("adopted", {"source": value.id})
            value._observe(self._resolve, self._reject_adopted)
            return
        self._settle(Outcome.Success(value))

    def _reject_adopted(self, reason: Any) -> None:
        self._settle(Outcome.Failure(reason))

    def _settle(self, outcome: Outcome[T]) -> None:
        """Transition out of pending and deliver to the matching queue."""
        with self._lock:
            if self._state is not State.PENDING:
                return
            self._outcome = outcome
            self._state = outcome.state
            if outcome.succeeded:
                handlers, payload = self._on_success, outcome.value
            else:
                handlers, payload = self._on_failure, outcome.reason
            self._on_success = []
            self._on_failure = []

        logger.debug("Promise %d %s", self.id, self._state.value)
        self._record(self._state.value, {"handlers": len(handlers)})
        self._dispatch_all(handlers, payload)

    def _dispatch_all(self, handlers: list[Handler], payload: Any) -> None:
        """Submit every handler, even if some submissions fail.

        The first submission error is re-raised once all handlers were tried.
        """
        error: Exception | None = None
        for handler in handlers:
            try:
                self._dispatch(handler, payload)
            except Exception as exc:
                logger.exception("Could not schedule handler of promise %d", self.id)
                if error is None:
                    error = exc
        if error is not None:
            raise error

    def _run_executor(self, executor: Executor) -> None:
        try:
            executor(self.fulfill, self.reject)
        except Exception as exc:
            self._record("executor_error", {"error": repr(exc)})
            self.reject(exc)

    # ------------------------------------------------------------------
    # Chaining
    # ------------------------------------------------------------------

    def then(
        self,
        on_success: Callable[[T], S | Promise[S]] | None = None,
        on_failure: Callable[[Any], S | Promise[S]] | None = None,
    ) -> Promise[S]:
        """Attach handlers and return a new promise resolved by their outcome.

        Args:
            on_success: Called with the result when this promise is fulfilled
            on_failure: Called with the reason when this promise is rejected

        Returns:
            A new promise. It is fulfilled with the handler's return value
            (adopting it if it is a promise) or rejected with the exception
            the handler raised. A missing handler passes this promise's
            result or reason through unchanged.
        """
        derived: Promise[S] = Promise(runtime=self._runtime)
        self._observe(
            derived._chained(on_success, derived.fulfill),
            derived._chained(on_failure, derived.reject),
        )
        return derived

    def success(self, on_success: Callable[[T], S | Promise[S]]) -> Promise[S]:
        """Attach a fulfillment handler, same as then(on_success)."""
        return self.then(on_success)

    def failure(self, on_failure: Callable[[Any], S | Promise[S]]) -> Promise[S]:
        """Attach a rejection handler, same as then(on_failure=on_failure)."""
        return self.then(on_failure=on_failure)

    def _chained(self, handler: Callable[[Any], Any] | None, passthrough: Handler) -> Handler:
        """Wrap a user handler so that it resolves this (derived) promise."""
        if handler is None:
            return passthrough

        def run(payload: Any) -> None:
            try:
                value = handler(payload)
            except Exception as exc:
                self._record("handler_error", {"error": repr(exc)})
                self.reject(exc)
            else:
                self.fulfill(value)

        return run

    def _observe(self, on_success: Handler, on_failure: Handler) -> None:
        """Queue raw handlers, or dispatch one right away if already settled."""
        with self._lock:
            outcome = self._outcome
            if outcome is None:
                self._on_success.append(on_success)
                self._on_failure.append(on_failure)
                return
        if outcome.succeeded:
            self._dispatch(on_success, outcome.value)
        else:
            self._dispatch(on_failure, outcome.reason)

    def _dispatch(self, handler: Handler, payload: Any) -> None:
        self._runtime.foreground.submit(functools.partial(handler, payload))

    # ------------------------------------------------------------------
    # asyncio bridge
    # ------------------------------------------------------------------

    def __await__(self) -> Generator[Any, None, T]:
        loop = asyncio.get_running_loop()
        future: asyncio.Future[T] = loop.create_future()

        def deliver_result(value: Any) -> None:
            loop.call_soon_threadsafe(_set_future_result, future, value)

        def deliver_reason(reason: Any) -> None:
            error = reason if isinstance(reason, BaseException) else PromiseRejected(reason)
            loop.call_soon_threadsafe(_set_future_exception, future, error)

        self._observe(deliver_result, deliver_reason)
        return future.__await__()

    def _record(self, action: str, info: dict[str, Any] | None = None) -> None:
        trace = self._runtime.trace
        if trace is not None:
            trace.record(action, self.id, info)

    def __repr__(self) -> str:
        if self._state is State.PENDING:
            v = "(pending)"
        elif self._state is State.REJECTED:
            v = f"{self.reason!r} (rejected)"
        else:
            v = repr(self.result)
        return f"<{type(self).__name__} #{self.id} {v}>"


def _set_future_result(future: asyncio.Future[Any], value: Any) -> None:
    if not future.done():
        future.set_result(value)


def _set_future_exception(future: asyncio.Future[Any], error: BaseException) -> None:
    if not future.done():
        future.set_exception(error)
