"""
Command execution utilities.

This module provides functions for executing short-lived helper commands,
turning the user's command line into an argv, and checking for system
dependencies.
"""

import logging
import re
import shlex
import shutil
import subprocess
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

logger = logging.getLogger(__name__)

# Characters that only mean something to a shell. A single command string
# containing any of them is handed to the shell instead of being split.
_SHELL_SYNTAX = re.compile(r"[|&;<>()$`\\\"'*?\[\]#~=%{}\n]")


def run_command(
    argv: Sequence[str], cwd: Optional[Path] = None
) -> Tuple[Optional[int], str, str]:
    """Execute a command and capture its output.

    Args:
        argv: The command and its arguments.
        cwd: Working directory, None for the current one.

    Returns:
        Tuple of (return_code, stdout_string, stderr_string).
        return_code is None when the command could not be executed at all;
        stderr then holds the reason.

    Note:
        Uses UTF-8 decoding with error replacement so odd file names in the
        utility's diagnostics never break decoding.
    """
    logger.debug(f"Executing command: {shlex.join(argv)}")
    try:
        process = subprocess.run(
            list(argv),
            cwd=cwd,
            stdin=subprocess.DEVNULL,
            capture_output=True,
            text=True,
            encoding="utf-8",
            errors="replace",
            check=False,
        )
        return process.returncode, process.stdout, process.stderr
    except FileNotFoundError:
        return None, "", f"command not found: {argv[0]}"
    except PermissionError:
        return None, "", f"permission denied: {argv[0]}"
    except OSError as e:
        return None, "", f"cannot execute {argv[0]}: {e}"


def needs_shell(command: str) -> bool:
    """Return True if a command string uses shell syntax.

    Examples:
        >>> needs_shell("make -j8")
        False
        >>> needs_shell("make -j8 && make install")
        True
    """
    return bool(_SHELL_SYNTAX.search(command))


def prepare_command(command: Sequence[str], shell: str = "/bin/sh") -> List[str]:
    """Turn the command given on the command line into an argv.

    A command of several arguments is executed as is. A single string is
    split with shlex when it is a plain command line, and passed to
    ``shell -c`` when it uses shell syntax such as pipes or redirections.

    Args:
        command: Positional command-line arguments.
        shell: Shell executable for command strings with shell syntax.

    Returns:
        The argv to launch.

    Raises:
        ValueError: If the command is empty.

    Examples:
        >>> prepare_command(["make", "-j8"])
        ['make', '-j8']
        >>> prepare_command(["make -j8"])
        ['make', '-j8']
        >>> prepare_command(["make > build.log"])
        ['/bin/sh', '-c', 'make > build.log']
    """
    if not command:
        raise ValueError("No command given")

    if len(command) > 1:
        return list(command)

    command_line = command[0]
    if not command_line.strip():
        raise ValueError("No command given")
    if needs_shell(command_line):
        return [shell, "-c", command_line]
    return shlex.split(command_line)


def check_command_installed(executable: str) -> bool:
    """Check if an executable is available on the system PATH.

    Returns:
        True if ``executable`` resolves to a program, False otherwise.
    """
    return shutil.which(executable) is not None
