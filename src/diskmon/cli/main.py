"""
Command-line interface for diskmon.

This module provides the `diskmon` entry point: it parses arguments, merges
them over the configuration file, runs one monitoring session and exits
with the monitored command's exit status.
"""

import argparse
import dataclasses
import logging
import sys
import tomllib
from pathlib import Path
from typing import List, Optional

from .. import __version__
from ..config import get_config, set_config_path
from ..config.validators import (
    MAX_INTERVAL_SECONDS,
    MIN_INTERVAL_SECONDS,
    OUTPUT_FORMATS,
)
from ..models.config import AppConfig
from ..models.runtime import RunContext
from ..orchestration import SessionRunner
from ..system.commands import prepare_command
from ..validation import (
    DiskMonError,
    ValidationError,
    handle_cli_error,
    validate_directory,
    validate_positive_float,
)

LOG_FORMAT = "%(asctime)s [%(levelname)-5.5s] %(name)s:%(filename)s:%(lineno)d\t %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Exit status for failures of diskmon itself, as opposed to the command's.
EXIT_MONITOR_FAILURE = 125

logger = logging.getLogger(__name__)


def setup_logging(level: str) -> None:
    """Configure root logging on stderr; stdout may carry sample rows."""
    logging.basicConfig(
        level=getattr(logging, level),
        format=LOG_FORMAT,
        datefmt=LOG_DATE_FORMAT,
        stream=sys.stderr,
        force=True,
    )


def resolve_log_level(configured: str, verbose: int = 0, quiet: bool = False) -> str:
    """
    Combine the configured level with -v/-q flags.

    Examples:
        >>> resolve_log_level("WARNING", verbose=1)
        'INFO'
        >>> resolve_log_level("WARNING", verbose=2)
        'DEBUG'
        >>> resolve_log_level("INFO", quiet=True)
        'ERROR'
    """
    if quiet:
        return "ERROR"
    if verbose >= 2:
        return "DEBUG"
    if verbose == 1:
        return "INFO"
    return configured


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser of the `diskmon` command."""
    parser = argparse.ArgumentParser(
        prog="diskmon",
        description=(
            "Run a command while sampling the disk usage of a directory, "
            "and write the usage time series as TSV."
        ),
        epilog=(
            "Exit status is the command's own (128+N if it was killed by signal N), "
            f"or {EXIT_MONITOR_FAILURE} if diskmon itself failed."
        ),
    )
    parser.add_argument(
        "-p",
        "--path",
        type=Path,
        default=Path("."),
        help="Directory to monitor (default: current directory).",
    )
    parser.add_argument(
        "-o",
        "--output",
        type=str,
        default=None,
        help="Output file (default: standard output; '-' also means standard output).",
    )
    parser.add_argument(
        "-r",
        "--interval",
        type=float,
        default=None,
        help="Sampling interval in seconds (default: monitor.interval_seconds, 1.0).",
    )
    parser.add_argument(
        "-f",
        "--format",
        choices=OUTPUT_FORMATS,
        default=None,
        help="Output format (default: output.format, tsv). Parquet requires -o.",
    )
    parser.add_argument(
        "-c",
        "--config",
        type=Path,
        default=None,
        help="Configuration file (TOML).",
    )
    parser.add_argument(
        "--sample-at-start",
        action="store_true",
        default=None,
        help="Measure the directory once before the command starts.",
    )
    parser.add_argument(
        "--allow-partial",
        action="store_true",
        default=None,
        help="Accept du's size even when it exits non-zero.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Log more (-v info, -vv debug).",
    )
    parser.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        help="Log errors only.",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "command",
        nargs=argparse.REMAINDER,
        help="Command to run, as one string or as separate arguments.",
    )
    return parser


def apply_cli_overrides(config: AppConfig, args: argparse.Namespace) -> AppConfig:
    """
    Return a copy of `config` with the values given on the command line.

    Raises:
        ValidationError: If a flag value is out of range
    """
    monitor = config.monitor
    probe = config.probe
    output = config.output

    if args.interval is not None:
        interval = validate_positive_float(
            args.interval,
            min_value=MIN_INTERVAL_SECONDS,
            max_value=MAX_INTERVAL_SECONDS,
            field_name="--interval",
        )
        monitor = dataclasses.replace(monitor, interval_seconds=interval)
    if args.sample_at_start is not None:
        monitor = dataclasses.replace(monitor, sample_at_start=args.sample_at_start)
    if args.allow_partial is not None:
        probe = dataclasses.replace(probe, allow_partial=args.allow_partial)
    if args.format is not None:
        output = dataclasses.replace(output, format=args.format)

    return dataclasses.replace(config, monitor=monitor, probe=probe, output=output)


def build_run_context(args: argparse.Namespace, config: AppConfig) -> RunContext:
    """
    Resolve arguments and configuration into a RunContext.

    Raises:
        ValidationError: If the target directory or the command is invalid
    """
    target_path = validate_directory(args.path, field_name="--path")

    command_args = list(args.command)
    if command_args and command_args[0] == "--":
        command_args = command_args[1:]
    try:
        command = prepare_command(command_args, shell=config.runner.shell)
    except ValueError as e:
        raise ValidationError(str(e), field_name="command", value=command_args) from e

    output_path = None
    if args.output is not None and args.output != "-":
        output_path = Path(args.output)

    return RunContext(
        command=command,
        target_path=target_path,
        output_path=output_path,
        config=config,
    )


def main(argv: Optional[List[str]] = None) -> int:
    """
    Run diskmon with the given arguments.

    Returns:
        The monitored command's exit status

    Raises:
        SystemExit: With status 125 when diskmon itself fails, or 2 on
            usage errors
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    if not args.command or args.command == ["--"]:
        parser.error("no command given")

    # Provisional logging so configuration problems are reported.
    setup_logging(resolve_log_level("WARNING", args.verbose, args.quiet))

    try:
        if args.config is not None:
            set_config_path(args.config)
        app_config = apply_cli_overrides(get_config(), args)
    except (OSError, tomllib.TOMLDecodeError, ValidationError) as e:
        handle_cli_error(
            error=e,
            context="configuration loading",
            exit_code=EXIT_MONITOR_FAILURE,
            logger=logger,
        )

    setup_logging(resolve_log_level(app_config.monitor.log_level, args.verbose, args.quiet))

    try:
        context = build_run_context(args, app_config)
    except ValidationError as e:
        handle_cli_error(
            error=e,
            context="argument validation",
            exit_code=EXIT_MONITOR_FAILURE,
            logger=logger,
        )

    try:
        summary = SessionRunner(context).run()
    except (DiskMonError, ValidationError) as e:
        handle_cli_error(
            error=e,
            context="monitoring session",
            exit_code=EXIT_MONITOR_FAILURE,
            logger=logger,
        )
    except Exception as e:
        handle_cli_error(
            error=e,
            context="monitoring session",
            exit_code=EXIT_MONITOR_FAILURE,
            include_traceback=True,
            logger=logger,
        )

    return summary.exit_code


def main_cli() -> None:
    """Console script entry point."""
    sys.exit(main())


if __name__ == "__main__":
    main_cli()
