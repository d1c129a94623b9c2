"""
Disk usage probe backed by the `du` utility.

Unit rule: `du -s -k PATH` reports the space allocated to PATH in KiB on
both GNU and BSD systems. The first whitespace-delimited token of its output
is multiplied by `unit_bytes` (1024) so that every sample of a session is in
bytes. Symbolic links are not followed, which is `du`'s default.
"""

import logging
import re
import shlex
from pathlib import Path
from typing import Callable, List, Optional, Sequence, Tuple, Union

from ..models.config import DEFAULT_PROBE_COMMAND
from ..system.commands import run_command
from ..validation import ParseError, ProbeError
from .base import SizeProbe

logger = logging.getLogger(__name__)

_SIZE_TOKEN = re.compile(r"^\d+$")

# Signature of run_command; replaced by a fake in tests.
CommandExecutor = Callable[[Sequence[str]], Tuple[Optional[int], str, str]]


def parse_size_output(output: str, unit_bytes: int = 1024) -> int:
    """
    Parse the leading size field of a size utility's output.

    Args:
        output: Standard output of the utility, e.g. "1234\\t/some/dir\\n".
        unit_bytes: Bytes per unit of the reported number.

    Returns:
        The size in bytes.

    Raises:
        ParseError: If the output is empty or does not start with a
            non-negative integer.
    """
    tokens = output.split(maxsplit=1)
    if not tokens:
        raise ParseError("size utility produced no output", output=output)

    size_token = tokens[0]
    if not _SIZE_TOKEN.match(size_token):
        raise ParseError(
            f"expected a byte count, got {size_token[:40]!r}",
            output=output,
        )
    return int(size_token) * unit_bytes


class DuSizeProbe(SizeProbe):
    """
    Measures directory size by running `du` once per call.

    Attributes:
        command: Utility argv; the measured path is appended.
        unit_bytes: Bytes per unit of the utility's output.
        allow_partial: Use the reported size even if the utility exits
            non-zero (it still prints a total when some entries could not
            be read).
    """

    def __init__(
        self,
        command: Optional[List[str]] = None,
        unit_bytes: int = 1024,
        allow_partial: bool = False,
        executor: CommandExecutor = run_command,
    ):
        self.command = list(command) if command else list(DEFAULT_PROBE_COMMAND)
        self.unit_bytes = unit_bytes
        self.allow_partial = allow_partial
        self._execute = executor

    def measure(self, path: Union[str, Path]) -> int:
        argv = self.command + [str(path)]
        returncode, stdout, stderr = self._execute(argv)

        if returncode is None:
            raise ProbeError(
                f"could not run size utility: {stderr}",
                path=str(path),
                stderr=stderr,
            )

        if returncode != 0:
            message = f"{shlex.join(argv)} exited with status {returncode}"
            detail = _first_line(stderr)
            if detail:
                message = f"{message}: {detail}"
            if not self.allow_partial:
                raise ProbeError(message, path=str(path), returncode=returncode, stderr=stderr)
            try:
                size = parse_size_output(stdout, self.unit_bytes)
            except ParseError as e:
                raise ProbeError(message, path=str(path), returncode=returncode, stderr=stderr) from e
            logger.warning(f"Using partial measurement of {path}: {message}")
            return size

        try:
            return parse_size_output(stdout, self.unit_bytes)
        except ParseError as e:
            e.path = str(path)
            e.returncode = returncode
            e.stderr = stderr
            raise

    def describe(self) -> str:
        return shlex.join(self.command)


def _first_line(text: str) -> str:
    for line in text.splitlines():
        if line.strip():
            return line.strip()
    return ""
