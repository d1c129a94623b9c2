"""
Execution of the monitored command.

This module launches the user's command, reports its exit status to the
event loop and stops it when a session has to be aborted.
"""

from .command_runner import CommandRunner, normalize_returncode

__all__ = [
    "CommandRunner",
    "normalize_returncode",
]
