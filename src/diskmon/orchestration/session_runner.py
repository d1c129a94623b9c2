"""
High-level orchestration of one monitoring session.

The SessionRunner turns a RunContext into live collaborators (command
runner, async probe, record sink), runs the MonitorLoop on an event loop
and makes sure every resource is released however the session ends.
"""

import asyncio
import logging
import shlex
from typing import Optional

from ..collectors import AsyncSizeProbe, create_probe
from ..executor.command_runner import CommandRunner
from ..models.results import SessionSummary
from ..models.runtime import RunContext
from ..monitoring import MonitorLoop, MonitorSession
from ..storage import create_sink
from ..validation import ErrorSeverity, handle_error
from .signal_handler import SignalForwarder

logger = logging.getLogger(__name__)


class SessionRunner:
    """
    Runs the monitored command under a MonitorLoop.

    Errors are not swallowed here: SpawnError, SinkWriteError and
    ValidationError reach the caller, which decides on the exit status.
    """

    def __init__(self, context: RunContext):
        """
        Args:
            context: Fully resolved invocation (command, target, output, config)
        """
        self.context = context
        self.summary: Optional[SessionSummary] = None

    async def run_async(self) -> SessionSummary:
        """
        Run the session on the current event loop.

        Returns:
            The session summary, carrying the command's exit status
        """
        config = self.context.config

        # Opening the sink first keeps an unwritable output from ever
        # starting the command.
        sink = create_sink(
            format_type=config.output.format,
            output_path=self.context.output_path,
            float_precision=config.output.float_precision,
            compression=config.output.parquet_compression,
        )
        probe = AsyncSizeProbe(create_probe(config.probe))
        runner = CommandRunner(
            self.context.command,
            terminate_timeout=config.runner.terminate_timeout,
        )
        session = MonitorSession(
            target_path=self.context.target_path,
            interval_seconds=self.context.interval_seconds,
        )
        loop = MonitorLoop(
            runner,
            probe,
            sink,
            session,
            sample_at_start=config.monitor.sample_at_start,
        )

        logger.info(
            f"Monitoring {self.context.target_path} every {self.context.interval_seconds}s "
            f"while running: {shlex.join(self.context.command)}"
        )
        logger.info(f"Writing {self.context.output_format} samples to {self.context.describe_output()}")

        try:
            with SignalForwarder(runner):
                self.summary = await loop.run()
        except BaseException:
            # The original error matters more than a failing close.
            self._close_quietly(sink)
            raise
        finally:
            probe.close()

        sink.close()
        logger.info(self.summary.format_report())
        return self.summary

    @staticmethod
    def _close_quietly(sink) -> None:
        try:
            sink.close()
        except Exception as e:
            handle_error(
                error=e,
                context="closing output after a failed session",
                severity=ErrorSeverity.WARNING,
                reraise=False,
                logger=logger,
            )

    def run(self) -> SessionSummary:
        """
        Run the session synchronously on a fresh event loop.

        Raises:
            RuntimeError: If called from inside a running event loop;
                use run_async() there
        """
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            pass
        else:
            raise RuntimeError(
                "Cannot run a synchronous SessionRunner from within an async context. "
                "Use run_async() directly."
            )

        loop = asyncio.new_event_loop()
        asyncio.set_event_loop(loop)
        try:
            return loop.run_until_complete(self.run_async())
        finally:
            try:
                loop.run_until_complete(loop.shutdown_default_executor())
            finally:
                loop.close()
                asyncio.set_event_loop(None)
