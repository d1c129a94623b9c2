"""
Asynchronous runner for the monitored command.

This module provides a CommandRunner that launches the user's command as a
child process with inherited standard streams, so interactive and console
output passes through untouched, and reports its exit status to the event
loop exactly once.
"""

import asyncio
import logging
import shlex
import signal
import subprocess
import time
from pathlib import Path
from typing import Callable, List, Optional

import psutil

from ..validation import SpawnError, handle_error, ErrorSeverity

logger = logging.getLogger(__name__)


def normalize_returncode(returncode: int) -> int:
    """
    Map a Popen return code to a shell-style exit status.

    A child killed by signal N has a return code of -N; shells report that
    as 128 + N, and so does diskmon.
    """
    if returncode < 0:
        return 128 + (-returncode)
    return returncode


class CommandRunner:
    """
    Launches the monitored command and waits for it asynchronously.

    The blocking `Popen.wait` runs on the event loop's default executor, so
    awaiting completion can be raced against other events.
    """

    def __init__(
        self,
        argv: List[str],
        cwd: Optional[Path] = None,
        terminate_timeout: float = 5.0,
        popen: Callable[..., subprocess.Popen] = subprocess.Popen,
    ):
        """
        Initialize the command runner.

        Args:
            argv: Command and arguments to launch
            cwd: Working directory for the command, None to inherit ours
            terminate_timeout: Seconds between SIGTERM and SIGKILL in
                terminate_async()
            popen: Process factory, replaceable in tests
        """
        if not argv:
            raise ValueError("argv must not be empty")
        self.argv = list(argv)
        self.cwd = cwd
        self.terminate_timeout = terminate_timeout
        self._popen = popen

        self.process: Optional[subprocess.Popen] = None
        self.return_code: Optional[int] = None
        self.start_time: Optional[float] = None
        self.end_time: Optional[float] = None

        self._completion: Optional[asyncio.Future] = None
        self._wait_consumed = False

    @property
    def pid(self) -> Optional[int]:
        return self.process.pid if self.process else None

    @property
    def is_running(self) -> bool:
        return self._completion is not None and not self._completion.done()

    @property
    def duration_seconds(self) -> float:
        if self.start_time is None:
            return 0.0
        end_time = self.end_time or time.monotonic()
        return end_time - self.start_time

    async def start_async(self) -> int:
        """
        Launch the command.

        Returns:
            Process ID of the child

        Raises:
            SpawnError: If the executable cannot be found or launched
            RuntimeError: If the command was already started
        """
        if self.process is not None:
            raise RuntimeError("Command has already been started")

        loop = asyncio.get_running_loop()
        self.process = await loop.run_in_executor(None, self._start_process)
        self.start_time = time.monotonic()
        self._completion = loop.run_in_executor(None, self.process.wait)

        logger.info(f"Started command (PID {self.process.pid}): {shlex.join(self.argv)}")
        return self.process.pid

    def _start_process(self) -> subprocess.Popen:
        """Create the child process (runs on a worker thread)."""
        try:
            return self._popen(self.argv, cwd=self.cwd)
        except FileNotFoundError as e:
            raise SpawnError(f"command not found: {self.argv[0]}", command=self.argv) from e
        except PermissionError as e:
            raise SpawnError(f"permission denied: {self.argv[0]}", command=self.argv) from e
        except (OSError, ValueError) as e:
            raise SpawnError(f"cannot execute {self.argv[0]}: {e}", command=self.argv) from e

    async def wait_async(self) -> int:
        """
        Wait for the command to exit.

        Can be awaited once per runner; the completion is a one-shot event.

        Returns:
            The command's exit status (128 + N when killed by signal N)

        Raises:
            RuntimeError: If the command was never started or its
                completion was already consumed
        """
        if self._completion is None:
            raise RuntimeError("Command is not running")
        if self._wait_consumed:
            raise RuntimeError("Command completion has already been consumed")
        self._wait_consumed = True

        raw_code = await asyncio.shield(self._completion)
        self.end_time = time.monotonic()
        self.return_code = normalize_returncode(raw_code)
        logger.info(
            f"Command exited with status {self.return_code} after {self.duration_seconds:.3f}s"
        )
        return self.return_code

    def send_signal(self, signum: int) -> bool:
        """
        Deliver a signal to the command.

        Returns:
            True if the signal was sent, False if the command is not running
        """
        if not self.process or self.process.poll() is not None:
            return False
        try:
            self.process.send_signal(signum)
            logger.debug(f"Sent signal {signum} to PID {self.process.pid}")
            return True
        except ProcessLookupError:
            return False

    async def terminate_async(self) -> None:
        """
        Stop the command and its descendants.

        Sends SIGTERM, waits up to `terminate_timeout` seconds, then sends
        SIGKILL to whatever is left.
        """
        if not self.process or self._completion is None or self._completion.done():
            return

        try:
            descendants = psutil.Process(self.process.pid).children(recursive=True)
        except (psutil.NoSuchProcess, psutil.AccessDenied):
            descendants = []

        logger.warning(
            f"Terminating command (PID {self.process.pid}) and {len(descendants)} descendant(s)"
        )
        self._signal_all(descendants, signal.SIGTERM)

        try:
            await asyncio.wait_for(asyncio.shield(self._completion), timeout=self.terminate_timeout)
        except asyncio.TimeoutError:
            logger.warning(
                f"Command did not exit within {self.terminate_timeout}s of SIGTERM, sending SIGKILL"
            )
            self._signal_all(descendants, signal.SIGKILL)
            await asyncio.shield(self._completion)

        # Descendants are not our children; psutil polls them instead of reaping.
        loop = asyncio.get_running_loop()
        _, alive = await loop.run_in_executor(
            None, lambda: psutil.wait_procs(descendants, timeout=self.terminate_timeout)
        )
        for proc in alive:
            try:
                proc.kill()
            except psutil.NoSuchProcess:
                pass

    def _signal_all(self, descendants: List[psutil.Process], signum: int) -> None:
        """Signal the child (through Popen, to keep its status) and its descendants."""
        try:
            self.process.send_signal(signum)
        except ProcessLookupError:
            pass
        for proc in descendants:
            try:
                proc.send_signal(signum)
            except (psutil.NoSuchProcess, psutil.AccessDenied) as e:
                handle_error(
                    error=e,
                    context=f"signalling descendant {proc.pid}",
                    severity=ErrorSeverity.DEBUG,
                    reraise=False,
                    logger=logger,
                )

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        if self.is_running:
            await self.terminate_async()
