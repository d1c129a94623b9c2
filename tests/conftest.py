"""
Pytest configuration and shared fixtures for the diskmon test suite.

This module provides common fixtures and test doubles (scripted probe,
in-memory sink, fake command runner) for all test modules.
"""

import asyncio
import shutil
import sys
import tempfile
import threading
from pathlib import Path
from typing import Callable, List, Optional, Union

import pytest

# Add src to Python path for testing
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from diskmon.collectors.base import SizeProbe  # noqa: E402
from diskmon.models.results import Sample  # noqa: E402
from diskmon.storage.base import RecordSink  # noqa: E402
from diskmon.validation import SinkWriteError  # noqa: E402


# ============================================================================
# Test Configuration
# ============================================================================


def pytest_configure(config):
    """Configure pytest with custom markers and settings."""
    config.addinivalue_line("markers", "unit: mark test as a unit test")
    config.addinivalue_line("markers", "integration: mark test as an integration test")
    config.addinivalue_line("markers", "slow: mark test as slow running")


# ============================================================================
# Test Doubles
# ============================================================================


class ScriptedProbe(SizeProbe):
    """
    Probe that replays scripted readings.

    Each entry is either a size in bytes or an exception instance to raise.
    Once the script is exhausted the last entry repeats. `on_measure` is
    called with the 1-based call number after each call, from the probe's
    worker thread.
    """

    def __init__(
        self,
        script: List[Union[int, Exception]],
        delay: float = 0.0,
        on_measure: Optional[Callable[[int], None]] = None,
    ):
        self.script = list(script)
        self.delay = delay
        self.on_measure = on_measure
        self.calls = 0
        self.paths: List[Path] = []
        self._lock = threading.Lock()

    def measure(self, path):
        with self._lock:
            index = min(self.calls, len(self.script) - 1)
            self.calls += 1
            call_number = self.calls
            self.paths.append(Path(path))
        if self.delay:
            threading.Event().wait(self.delay)
        try:
            entry = self.script[index]
            if isinstance(entry, Exception):
                raise entry
            return entry
        finally:
            if self.on_measure is not None:
                self.on_measure(call_number)


class ListSink(RecordSink):
    """In-memory sink; `fail_on` makes the n-th write (1-based) fail."""

    def __init__(self, fail_on: Optional[int] = None):
        self.samples: List[Sample] = []
        self.fail_on = fail_on
        self.closed = False
        self._attempts = 0

    @property
    def rows_written(self) -> int:
        return len(self.samples)

    def write(self, sample: Sample) -> None:
        self._attempts += 1
        if self.fail_on is not None and self._attempts >= self.fail_on:
            raise SinkWriteError("disk full", destination="<memory>")
        self.samples.append(sample)

    def close(self) -> None:
        self.closed = True


class FakeRunner:
    """
    Stand-in for CommandRunner with a manually triggered exit.

    `finish()` is thread-safe so probes running on worker threads can end
    the "command" at a chosen point of the script. `exit_after` ends it
    automatically that many seconds after start.
    """

    def __init__(
        self,
        exit_code: int = 0,
        exit_after: Optional[float] = None,
        start_error: Optional[Exception] = None,
    ):
        self.exit_code = exit_code
        self.exit_after = exit_after
        self.start_error = start_error
        self.pid: Optional[int] = None
        self.started = False
        self.terminated = False
        self.signals: List[int] = []
        self.events: List[str] = []
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._done: Optional[asyncio.Event] = None

    async def start_async(self) -> int:
        self.events.append("start")
        if self.start_error is not None:
            raise self.start_error
        self._loop = asyncio.get_running_loop()
        self._done = asyncio.Event()
        self.started = True
        self.pid = 424242
        if self.exit_after is not None:
            self._loop.call_later(self.exit_after, self._done.set)
        return self.pid

    async def wait_async(self) -> int:
        await self._done.wait()
        self.events.append("exit")
        return self.exit_code

    def finish(self, exit_code: Optional[int] = None) -> None:
        if exit_code is not None:
            self.exit_code = exit_code
        self._loop.call_soon_threadsafe(self._done.set)

    def send_signal(self, signum: int) -> bool:
        self.signals.append(signum)
        return self.started

    async def terminate_async(self) -> None:
        self.terminated = True
        self.exit_code = 143
        self._done.set()


class TestDoubles:
    """Test doubles for the collaborators of a monitoring session."""

    ScriptedProbe = ScriptedProbe
    ListSink = ListSink
    FakeRunner = FakeRunner


@pytest.fixture
def doubles():
    """Provide the test double classes."""
    return TestDoubles


# ============================================================================
# Core Fixtures
# ============================================================================


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test files."""
    temp_path = tempfile.mkdtemp()
    yield Path(temp_path)
    shutil.rmtree(temp_path, ignore_errors=True)


@pytest.fixture
def list_sink():
    """An empty in-memory sink."""
    return ListSink()


@pytest.fixture
def sample_config_data():
    """Sample configuration data for testing."""
    return {
        "monitor": {
            "interval_seconds": 0.5,
            "sample_at_start": True,
            "log_level": "INFO",
        },
        "probe": {
            "command": ["du", "-s", "-k"],
            "unit_bytes": 1024,
            "allow_partial": True,
        },
        "output": {
            "format": "tsv",
            "float_precision": 2,
            "parquet_compression": "zstd",
        },
        "runner": {
            "shell": "/bin/sh",
            "terminate_timeout": 2.0,
        },
    }


# ============================================================================
# Configuration Fixtures
# ============================================================================


@pytest.fixture
def config_files(temp_dir, sample_config_data):
    """Create a temporary configuration file for testing."""
    import toml

    config_file = temp_dir / "config.toml"
    with open(config_file, "w") as f:
        toml.dump(sample_config_data, f)

    return {
        "config": config_file,
        "dir": temp_dir,
    }


@pytest.fixture(autouse=True)
def clear_config_after_test():
    """Automatically clear configuration cache after each test."""
    yield  # Run the test

    from diskmon.config import clear_config_cache, set_config_path

    clear_config_cache()
    # Back to the default, optional, configuration file.
    set_config_path(None)
