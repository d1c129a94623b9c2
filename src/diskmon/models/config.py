"""
Configuration data models.

This module contains the configuration data structures loaded from
`config.toml`. Every field has a default so that diskmon runs without any
configuration file at all.
"""

from dataclasses import dataclass, field
from typing import List

DEFAULT_PROBE_COMMAND = ["du", "-s", "-k"]


@dataclass
class MonitorConfig:
    """
    Settings of the sampling loop, the `[monitor]` table.
    """

    # Period of the sampling timer, in seconds.
    interval_seconds: float = 1.0
    # Take one sample before the command is spawned.
    sample_at_start: bool = False
    # Root log level for the CLI.
    log_level: str = "WARNING"


@dataclass
class ProbeConfig:
    """
    Settings of the external size measurement utility, the `[probe]` table.
    """

    # Utility argv; the monitored directory is appended as the last argument.
    command: List[str] = field(default_factory=lambda: list(DEFAULT_PROBE_COMMAND))
    # Bytes per unit of the utility's output (du -k reports KiB).
    unit_bytes: int = 1024
    # Accept a parsable size even when the utility exits non-zero.
    allow_partial: bool = False


@dataclass
class OutputConfig:
    """
    Settings of the record sink, the `[output]` table.
    """

    # "tsv" or "parquet".
    format: str = "tsv"
    # Decimal places of the elapsed_seconds column in TSV output.
    float_precision: int = 3
    # Parquet compression codec.
    parquet_compression: str = "snappy"


@dataclass
class RunnerConfig:
    """
    Settings of the monitored command launcher, the `[runner]` table.
    """

    # Shell used for command strings containing shell syntax.
    shell: str = "/bin/sh"
    # Seconds to wait after SIGTERM before SIGKILL when aborting a session.
    terminate_timeout: float = 5.0


@dataclass
class AppConfig:
    """
    The root configuration object that aggregates all loaded settings.
    """

    monitor: MonitorConfig = field(default_factory=MonitorConfig)
    probe: ProbeConfig = field(default_factory=ProbeConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    runner: RunnerConfig = field(default_factory=RunnerConfig)
