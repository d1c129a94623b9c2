"""
Defines the abstract interface of disk usage probes.

A probe measures the current size of a directory subtree, in bytes, each
time it is asked. Implementations may shell out to an external utility or,
in tests, replay scripted values.
"""

import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Union

logger = logging.getLogger(__name__)


class SizeProbe(ABC):
    """
    Abstract base class for disk usage probes.

    Subclasses implement `measure`, which is called once per tick from a
    worker thread. It must either return the size in bytes or raise
    ProbeError; any other exception is treated as a programming error.
    """

    @abstractmethod
    def measure(self, path: Union[str, Path]) -> int:
        """
        Measure the disk usage of a directory subtree.

        Args:
            path: Directory to measure.

        Returns:
            The size in bytes (non-negative).

        Raises:
            ProbeError: If the measurement failed.
            ParseError: If the measurement produced unreadable output.
        """
        pass

    def describe(self) -> str:
        """Short description used in log messages."""
        return self.__class__.__name__
