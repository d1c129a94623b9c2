"""
Data models and structures for the monitoring system.

Configuration Models:
- Sampling loop, probe, output and runner settings

Runtime Models:
- Per-invocation context (command, target directory, output destination)

Result Models:
- Immutable disk usage samples
- End-of-session summary
"""

from .config import (
    DEFAULT_PROBE_COMMAND,
    AppConfig,
    MonitorConfig,
    OutputConfig,
    ProbeConfig,
    RunnerConfig,
)
from .results import SAMPLE_FIELDS, Sample, SessionSummary
from .runtime import RunContext

__all__ = [
    # Configuration
    "DEFAULT_PROBE_COMMAND",
    "AppConfig",
    "MonitorConfig",
    "OutputConfig",
    "ProbeConfig",
    "RunnerConfig",
    # Runtime
    "RunContext",
    # Results
    "SAMPLE_FIELDS",
    "Sample",
    "SessionSummary",
]
