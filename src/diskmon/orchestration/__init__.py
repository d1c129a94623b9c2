"""
Orchestration of a monitoring run.

- SessionRunner: wires config, command, probe and sink into one session
- SignalForwarder: passes SIGINT/SIGTERM on to the monitored command
"""

from .session_runner import SessionRunner
from .signal_handler import FORWARDED_SIGNALS, SignalForwarder

__all__ = ["FORWARDED_SIGNALS", "SessionRunner", "SignalForwarder"]
