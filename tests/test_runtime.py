"""Test runtime configuration and schedulers."""

from __future__ import annotations

import asyncio
import logging
import threading

import pytest
from pydantic import ValidationError

from fakes import ManualRuntime
from promissory import (
    AsyncioScheduler,
    Promise,
    Runtime,
    RuntimeConfig,
    SerialScheduler,
    ThreadPoolScheduler,
    async_,
    get_runtime,
    set_runtime,
)


class TestRuntimeConfig:
    def test_defaults(self):
        config = RuntimeConfig()
        assert config.max_workers == 4
        assert config.foreground == "serial"
        assert config.trace is False

    def test_rejects_non_positive_workers(self):
        with pytest.raises(ValidationError):
            RuntimeConfig(max_workers=0)

    def test_rejects_unknown_foreground(self):
        with pytest.raises(ValidationError):
            RuntimeConfig(foreground="main_thread")

    def test_build_serial(self):
        rt = RuntimeConfig(trace=True).build()
        try:
            assert isinstance(rt.background, ThreadPoolScheduler)
            assert isinstance(rt.foreground, SerialScheduler)
            assert rt.trace is not None
        finally:
            rt.shutdown()

    def test_build_thread_pool_foreground(self):
        rt = RuntimeConfig(foreground="thread_pool").build()
        try:
            assert not isinstance(rt.foreground, SerialScheduler)
            assert isinstance(rt.foreground, ThreadPoolScheduler)
            assert rt.trace is None
        finally:
            rt.shutdown()


class TestDefaultRuntime:
    def test_set_runtime_replaces_default(self):
        manual = ManualRuntime()
        previous = set_runtime(manual)
        try:
            assert get_runtime() is manual
            promise = Promise.fulfilled(1)
            assert promise.runtime is manual
        finally:
            set_runtime(previous)

    def test_get_runtime_builds_once(self):
        previous = set_runtime(None)
        try:
            first = get_runtime()
            assert get_runtime() is first
            first.shutdown()
        finally:
            set_runtime(previous)

    def test_derived_promises_inherit_runtime(self, manual):
        derived = Promise.fulfilled(1, runtime=manual).then(lambda v: v)
        assert derived.runtime is manual


class TestSchedulers:
    def test_shutdown_shared_scheduler_once(self, manual):
        rt = Runtime(background=manual.background, foreground=manual.background)
        rt.shutdown()
        assert manual.background.closed

    def test_failing_work_is_logged(self, caplog):
        scheduler = ThreadPoolScheduler(max_workers=1)

        def work():
            raise RuntimeError("work failed")

        with caplog.at_level(logging.ERROR, logger="promissory.runtime.schedulers"):
            scheduler.submit(work)
            scheduler.shutdown(wait=True)

        assert "failed" in caplog.text
        assert "work failed" in caplog.text

    def test_serial_scheduler_runs_in_submission_order(self):
        scheduler = SerialScheduler()
        order = []
        for i in range(50):
            scheduler.submit(lambda i=i: order.append(i))
        scheduler.shutdown(wait=True)
        assert order == list(range(50))

    def test_asyncio_scheduler_delivers_on_loop_thread(self):
        async def run():
            background = ThreadPoolScheduler(max_workers=2)
            rt = Runtime(background=background, foreground=AsyncioScheduler())
            try:
                threads = []
                derived = async_(lambda: "x", runtime=rt).success(
                    lambda v: threads.append(threading.get_ident()) or v
                )
                value = await derived
                return value, threads
            finally:
                rt.shutdown(wait=False)

        value, threads = asyncio.run(run())
        assert value == "x"
        assert threads == [threading.get_ident()]
