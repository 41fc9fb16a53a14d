from collections.abc import Iterator

import pytest

from fakes import ManualRuntime
from promissory import Runtime, RuntimeConfig


@pytest.fixture
def runtime() -> Iterator[Runtime]:
    """Threaded runtime with a serial foreground and tracing enabled."""
    rt = RuntimeConfig(max_workers=4, trace=True).build()
    yield rt
    rt.shutdown(wait=True)


@pytest.fixture
def manual() -> ManualRuntime:
    """Deterministic runtime driven by run_all()."""
    return ManualRuntime()
