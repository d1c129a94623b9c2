"""
diskmon: disk usage monitoring of a directory while a command runs.

The package is organized into specialized modules:
- config: Configuration management and validation
- models: Data structures (samples, summaries, configuration)
- validation: Input validation and error handling
- system: Helper command execution and command line preparation
- collectors: Directory size probes
- executor: Monitored command execution
- monitoring: Sampling loop and aggregation
- storage: TSV and Parquet output
- orchestration: Session wiring and signal forwarding
- cli: Command-line interface

Usage:
    From command line:
        diskmon -p build/ -o usage.tsv -- make -j8

    Programmatically:
        from diskmon import RunContext, SessionRunner
        summary = SessionRunner(RunContext(["make"], Path("build"), None)).run()
"""

__version__ = "1.0.0"

# Main interfaces
from .config import clear_config_cache, get_config, set_config_path
from .orchestration import SessionRunner
from .monitoring import Aggregator, MonitorLoop, MonitorSession
from .cli import main_cli

# Model classes for external use
from .models import (
    AppConfig,
    MonitorConfig,
    OutputConfig,
    ProbeConfig,
    RunContext,
    RunnerConfig,
    Sample,
    SessionSummary,
)

# Errors
from .validation import (
    DiskMonError,
    ParseError,
    ProbeError,
    SinkWriteError,
    SpawnError,
    ValidationError,
)

__all__ = [
    # Main interfaces
    "get_config",
    "clear_config_cache",
    "set_config_path",
    "SessionRunner",
    "MonitorLoop",
    "MonitorSession",
    "Aggregator",
    "main_cli",
    # Models
    "AppConfig",
    "MonitorConfig",
    "OutputConfig",
    "ProbeConfig",
    "RunContext",
    "RunnerConfig",
    "Sample",
    "SessionSummary",
    # Errors
    "DiskMonError",
    "ParseError",
    "ProbeError",
    "SinkWriteError",
    "SpawnError",
    "ValidationError",
]
