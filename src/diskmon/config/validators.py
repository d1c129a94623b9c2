"""
Configuration validation utilities.

This module turns the raw tables of `config.toml` into validated
configuration models.
"""

import logging
from typing import Any, Dict

from ..models.config import (
    AppConfig,
    MonitorConfig,
    OutputConfig,
    ProbeConfig,
    RunnerConfig,
)
from ..validation import (
    ValidationError,
    validate_boolean,
    validate_command_argv,
    validate_enum_choice,
    validate_positive_float,
    validate_positive_integer,
)

logger = logging.getLogger(__name__)

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
OUTPUT_FORMATS = ["tsv", "parquet"]
PARQUET_COMPRESSIONS = ["snappy", "gzip", "brotli", "lz4", "zstd", "uncompressed"]

MIN_INTERVAL_SECONDS = 0.01
MAX_INTERVAL_SECONDS = 3600.0


def _warn_unknown_keys(section: str, data: Dict[str, Any], known: set) -> None:
    for key in data:
        if key not in known:
            logger.warning(f"Ignoring unknown key '{section}.{key}'")


def validate_monitor_config(monitor_data: Dict[str, Any]) -> MonitorConfig:
    """
    Validate and create a MonitorConfig from the `[monitor]` table.

    Raises:
        ValidationError: If validation fails
    """
    defaults = MonitorConfig()
    _warn_unknown_keys("monitor", monitor_data, {"interval_seconds", "sample_at_start", "log_level"})

    interval_seconds = validate_positive_float(
        monitor_data.get("interval_seconds", defaults.interval_seconds),
        min_value=MIN_INTERVAL_SECONDS,
        max_value=MAX_INTERVAL_SECONDS,
        field_name="monitor.interval_seconds",
    )
    sample_at_start = validate_boolean(
        monitor_data.get("sample_at_start", defaults.sample_at_start),
        field_name="monitor.sample_at_start",
    )
    log_level = validate_enum_choice(
        monitor_data.get("log_level", defaults.log_level),
        choices=LOG_LEVELS,
        field_name="monitor.log_level",
        case_sensitive=False,
    )

    return MonitorConfig(
        interval_seconds=interval_seconds,
        sample_at_start=sample_at_start,
        log_level=log_level,
    )


def validate_probe_config(probe_data: Dict[str, Any]) -> ProbeConfig:
    """
    Validate and create a ProbeConfig from the `[probe]` table.

    Raises:
        ValidationError: If validation fails
    """
    defaults = ProbeConfig()
    _warn_unknown_keys("probe", probe_data, {"command", "unit_bytes", "allow_partial"})

    command = validate_command_argv(
        probe_data.get("command", defaults.command),
        field_name="probe.command",
    )
    unit_bytes = validate_positive_integer(
        probe_data.get("unit_bytes", defaults.unit_bytes),
        min_value=1,
        field_name="probe.unit_bytes",
    )
    allow_partial = validate_boolean(
        probe_data.get("allow_partial", defaults.allow_partial),
        field_name="probe.allow_partial",
    )

    return ProbeConfig(command=command, unit_bytes=unit_bytes, allow_partial=allow_partial)


def validate_output_config(output_data: Dict[str, Any]) -> OutputConfig:
    """
    Validate and create an OutputConfig from the `[output]` table.

    Raises:
        ValidationError: If validation fails
    """
    defaults = OutputConfig()
    _warn_unknown_keys("output", output_data, {"format", "float_precision", "parquet_compression"})

    output_format = validate_enum_choice(
        output_data.get("format", defaults.format),
        choices=OUTPUT_FORMATS,
        field_name="output.format",
        case_sensitive=False,
    )
    float_precision = validate_positive_integer(
        output_data.get("float_precision", defaults.float_precision),
        min_value=0,
        max_value=9,
        field_name="output.float_precision",
    )
    parquet_compression = validate_enum_choice(
        output_data.get("parquet_compression", defaults.parquet_compression),
        choices=PARQUET_COMPRESSIONS,
        field_name="output.parquet_compression",
    )

    return OutputConfig(
        format=output_format,
        float_precision=float_precision,
        parquet_compression=parquet_compression,
    )


def validate_runner_config(runner_data: Dict[str, Any]) -> RunnerConfig:
    """
    Validate and create a RunnerConfig from the `[runner]` table.

    Raises:
        ValidationError: If validation fails
    """
    defaults = RunnerConfig()
    _warn_unknown_keys("runner", runner_data, {"shell", "terminate_timeout"})

    shell = runner_data.get("shell", defaults.shell)
    if not isinstance(shell, str) or not shell.strip():
        raise ValidationError(
            "runner.shell must be a non-empty string",
            field_name="runner.shell",
            value=shell,
        )
    terminate_timeout = validate_positive_float(
        runner_data.get("terminate_timeout", defaults.terminate_timeout),
        min_value=0.0,
        max_value=300.0,
        field_name="runner.terminate_timeout",
    )

    return RunnerConfig(shell=shell, terminate_timeout=terminate_timeout)


def validate_app_config(sections: Dict[str, Dict[str, Any]]) -> AppConfig:
    """
    Validate every section and assemble the AppConfig.

    Args:
        sections: Mapping of section name to raw table, as returned by
            `load_main_config`

    Raises:
        ValidationError: If any section is invalid
    """
    for name, table in sections.items():
        if not isinstance(table, dict):
            raise ValidationError(
                f"[{name}] must be a table",
                field_name=name,
                value=table,
            )

    return AppConfig(
        monitor=validate_monitor_config(sections.get("monitor", {})),
        probe=validate_probe_config(sections.get("probe", {})),
        output=validate_output_config(sections.get("output", {})),
        runner=validate_runner_config(sections.get("runner", {})),
    )
