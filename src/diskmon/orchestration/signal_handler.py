"""
Signal forwarding for the monitored command.

While a session is active, SIGINT and SIGTERM delivered to diskmon are
passed on to the monitored command instead of killing the monitor, so the
command decides how to exit and its final disk state is still sampled.
"""

import logging
import os
import signal
from typing import TYPE_CHECKING, Any, Dict, Tuple

if TYPE_CHECKING:
    from ..executor.command_runner import CommandRunner

logger = logging.getLogger(__name__)

FORWARDED_SIGNALS: Tuple[int, ...] = (signal.SIGINT, signal.SIGTERM)


class SignalForwarder:
    """
    Installs handlers that forward signals to a CommandRunner.

    A terminal Ctrl-C already reaches every process in the foreground
    process group, so SIGINT is only forwarded when the command runs in a
    different group; otherwise it would receive the signal twice.
    """

    def __init__(self, runner: "CommandRunner"):
        self.runner = runner
        self.signals_received = 0
        self._original_handlers: Dict[int, Any] = {}
        self._handlers_set = False

    def setup_signal_handlers(self) -> None:
        """Install the forwarding handlers, remembering the previous ones."""
        try:
            for signum in FORWARDED_SIGNALS:
                self._original_handlers[signum] = signal.signal(signum, self._handle_signal)
            self._handlers_set = True
            logger.debug("Signal forwarding enabled")
        except ValueError as e:
            # signal.signal only works in the main thread.
            logger.warning(f"Failed to set up signal handlers: {e}")

    def cleanup_signal_handlers(self) -> None:
        """Restore the handlers that were active before setup."""
        if not self._handlers_set:
            return
        try:
            for signum, handler in self._original_handlers.items():
                if handler is not None:
                    signal.signal(signum, handler)
            logger.debug("Signal handlers restored")
        except ValueError as e:
            logger.warning(f"Failed to restore signal handlers: {e}")
        finally:
            self._original_handlers.clear()
            self._handlers_set = False

    def _handle_signal(self, signum: int, frame: Any) -> None:
        self.signals_received += 1
        name = signal.Signals(signum).name

        if signum == signal.SIGINT and self._shares_process_group():
            logger.info(f"{name} received; the command got it from the terminal")
            return

        if self.runner.send_signal(signum):
            logger.info(f"{name} received, forwarded to the command")
        else:
            logger.info(f"{name} received, but the command is not running")

    def _shares_process_group(self) -> bool:
        pid = self.runner.pid
        if pid is None:
            return False
        try:
            return os.getpgid(pid) == os.getpgrp()
        except ProcessLookupError:
            return False

    def __enter__(self):
        self.setup_signal_handlers()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.cleanup_signal_handlers()
