"""
Asynchronous wrapper that runs a blocking SizeProbe off the event loop.

Running `du` blocks for as long as the directory scan takes. The wrapper
moves each measurement onto a dedicated worker thread so the event loop
can keep watching the monitored command while a scan is in progress.
"""

import asyncio
import logging
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Optional, Union

from .base import SizeProbe

logger = logging.getLogger(__name__)


class AsyncSizeProbe:
    """
    Asynchronous facade over a SizeProbe.

    Measurements are serialized on a single worker thread: a tick never
    starts a second scan while the previous one is still running.
    """

    def __init__(self, probe: SizeProbe, executor: Optional[ThreadPoolExecutor] = None):
        """
        Initialize the async probe.

        Args:
            probe: The blocking probe to wrap
            executor: Executor to run measurements on. When omitted, a
                single-worker executor is created and owned by this object.
        """
        self.probe = probe
        self._owns_executor = executor is None
        self.executor = executor or ThreadPoolExecutor(
            max_workers=1, thread_name_prefix="SizeProbe"
        )
        self._closed = False

    async def measure_async(self, path: Union[str, Path]) -> int:
        """
        Measure the directory without blocking the event loop.

        Returns:
            Size in bytes

        Raises:
            ProbeError: Propagated from the wrapped probe
            RuntimeError: If the probe has been closed
        """
        if self._closed:
            raise RuntimeError("AsyncSizeProbe is closed")

        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(self.executor, self.probe.measure, path)

    def close(self) -> None:
        """Release the worker thread if this object owns it."""
        if self._closed:
            return
        self._closed = True
        if self._owns_executor:
            # A scan still in flight is abandoned; it finishes on its own.
            self.executor.shutdown(wait=False, cancel_futures=True)
        logger.debug(f"AsyncSizeProbe closed ({self.probe.describe()})")

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        self.close()
