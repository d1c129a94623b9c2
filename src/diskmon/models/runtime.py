"""
Runtime data models.

This module contains the context of a single invocation: what to run,
what to measure and where to write, after configuration and command-line
arguments have been merged.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from .config import AppConfig


@dataclass
class RunContext:
    """
    Everything one monitoring session needs to know about its invocation.
    """

    # The monitored command, as given on the command line.
    command: List[str]
    # Directory whose disk usage is sampled.
    target_path: Path
    # Output file, None for standard output.
    output_path: Optional[Path]
    # Effective configuration (file values overridden by flags).
    config: AppConfig = field(default_factory=AppConfig)

    @property
    def interval_seconds(self) -> float:
        return self.config.monitor.interval_seconds

    @property
    def output_format(self) -> str:
        return self.config.output.format

    def describe_output(self) -> str:
        """Human readable output destination for log messages."""
        return str(self.output_path) if self.output_path else "<stdout>"
