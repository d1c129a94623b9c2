"""
Monitoring of a directory while a command runs.

- MonitorSession / Aggregator: per-session baseline, delta and peak
- MonitorLoop: the timer versus command-exit race
"""

from .aggregator import Aggregator, MonitorSession
from .coordinator import MonitorLoop

__all__ = ["Aggregator", "MonitorLoop", "MonitorSession"]
