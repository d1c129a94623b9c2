"""
System interaction utilities.

This module provides helper command execution, command-line preparation
for the monitored program, and dependency checks.
"""

from .commands import (
    check_command_installed,
    needs_shell,
    prepare_command,
    run_command,
)

__all__ = [
    "check_command_installed",
    "needs_shell",
    "prepare_command",
    "run_command",
]
