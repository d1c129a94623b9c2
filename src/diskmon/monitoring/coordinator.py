"""
Asynchronous coordination of the monitored command and the sampling timer.

This module provides the MonitorLoop that launches the command, samples the
target directory at a fixed rate while the command runs, and takes one final
sample once the command has exited.
"""

import asyncio
import logging
import math
import time
from typing import Callable, Optional, Tuple

from ..collectors.async_probe import AsyncSizeProbe
from ..executor.command_runner import CommandRunner
from ..models.results import Sample, SessionSummary
from ..storage.base import RecordSink
from ..validation import ProbeError
from .aggregator import Aggregator, MonitorSession

logger = logging.getLogger(__name__)


class MonitorLoop:
    """
    Drives one monitoring session.

    Each iteration races the next timer deadline against the command's
    completion. A timer that fires takes a sample; a completion ends the
    loop, so no periodic sample is taken after the command has exited.
    Deadlines are fixed relative to the session start, and deadlines that
    passed while a slow probe was running are skipped, not made up.
    """

    def __init__(
        self,
        runner: CommandRunner,
        probe: AsyncSizeProbe,
        sink: RecordSink,
        session: MonitorSession,
        sample_at_start: bool = False,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Initialize the monitor loop.

        Args:
            runner: Runner for the monitored command, not yet started
            probe: Probe measuring the target directory
            sink: Destination of the samples
            session: Fresh session state; its start_time anchors the ticks
            sample_at_start: Take a baseline sample before launching the command
            clock: Monotonic clock, replaceable in tests
        """
        self.runner = runner
        self.probe = probe
        self.sink = sink
        self.session = session
        self.sample_at_start = sample_at_start
        self._clock = clock

        self.aggregator = Aggregator(session)
        self.samples_emitted = 0
        self.probe_failures = 0
        self.ticks_skipped = 0

    async def run(self) -> SessionSummary:
        """
        Run the command under monitoring until it exits.

        Returns:
            Summary of the session, carrying the command's exit status

        Raises:
            SpawnError: If the command cannot be launched; nothing has been
                written to the sink
            SinkWriteError: If a sample cannot be written; the command has
                been terminated before this propagates
        """
        self.session.start_time = self._clock()
        # The start reading is only written once the command is running.
        start_reading = None
        if self.sample_at_start:
            start_reading = await self._measure("start")

        await self.runner.start_async()
        wait_task = asyncio.create_task(self.runner.wait_async(), name="command-wait")

        try:
            if start_reading is not None:
                self._emit(*start_reading)
            exit_code = await self._sample_until_exit(wait_task)
        finally:
            if not wait_task.done():
                await self._abort(wait_task)

        final_sample = await self._take_sample("final")

        summary = SessionSummary(
            exit_code=exit_code,
            samples_emitted=self.samples_emitted,
            probe_failures=self.probe_failures,
            final_sample_emitted=final_sample is not None,
            baseline_bytes=self.session.baseline_bytes,
            final_usage_bytes=final_sample.usage_bytes if final_sample else None,
            peak_bytes=self.session.peak_bytes,
            duration_seconds=self.session.elapsed(self._clock()),
        )
        logger.debug(
            f"Session finished: {self.samples_emitted} samples, "
            f"{self.probe_failures} probe failures, {self.ticks_skipped} ticks skipped"
        )
        return summary

    async def _sample_until_exit(self, wait_task: asyncio.Task) -> int:
        """Sample on every tick until the command completes; return its status."""
        interval = self.session.interval_seconds
        tick = 1

        while True:
            deadline = self.session.start_time + tick * interval
            delay = max(0.0, deadline - self._clock())
            timer = asyncio.create_task(asyncio.sleep(delay), name=f"tick-{tick}")

            try:
                done, _ = await asyncio.wait(
                    {wait_task, timer}, return_when=asyncio.FIRST_COMPLETED
                )
            finally:
                if not timer.done():
                    timer.cancel()
                    await asyncio.gather(timer, return_exceptions=True)

            # Completion wins a tie with the timer.
            if wait_task in done:
                return wait_task.result()

            await self._take_sample("tick")

            next_tick = math.floor(self.session.elapsed(self._clock()) / interval) + 1
            if next_tick > tick + 1:
                skipped = next_tick - tick - 1
                self.ticks_skipped += skipped
                logger.debug(f"Probe overran the interval, skipping {skipped} tick(s)")
            tick = max(tick + 1, next_tick)

    async def _take_sample(self, kind: str) -> Optional[Sample]:
        """
        Measure the target, aggregate and write one row.

        Probe failures are logged and counted; the tick produces no row.
        Sink failures propagate.
        """
        reading = await self._measure(kind)
        if reading is None:
            return None
        return self._emit(*reading)

    async def _measure(self, kind: str) -> Optional[Tuple[float, int]]:
        """Return (elapsed, usage) of one measurement, or None if the probe failed."""
        elapsed = self.session.elapsed(self._clock())
        try:
            usage = await self.probe.measure_async(self.session.target_path)
        except ProbeError as e:
            self.probe_failures += 1
            logger.warning(f"Skipping {kind} sample at {elapsed:.3f}s: {e}")
            return None
        return elapsed, usage

    def _emit(self, elapsed: float, usage: int) -> Sample:
        sample = self.aggregator.update(usage, elapsed)
        self.sink.write(sample)
        self.samples_emitted += 1
        return sample

    async def _abort(self, wait_task: asyncio.Task) -> None:
        """Terminate the command and reap it after a failure or cancellation."""
        logger.warning("Monitoring stopped early, terminating command")
        await self.runner.terminate_async()
        await asyncio.gather(wait_task, return_exceptions=True)
