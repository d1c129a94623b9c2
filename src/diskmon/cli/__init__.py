"""
Command-line interface.
"""

from .main import EXIT_MONITOR_FAILURE, build_parser, main, main_cli

__all__ = ["EXIT_MONITOR_FAILURE", "build_parser", "main", "main_cli"]
