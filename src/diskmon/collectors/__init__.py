"""
Disk usage probes.

- SizeProbe: abstract interface of a single directory size measurement
- DuSizeProbe: implementation backed by the `du` utility
- AsyncSizeProbe: runs any probe on a worker thread for the event loop
"""

from .async_probe import AsyncSizeProbe
from .base import SizeProbe
from .du_probe import DuSizeProbe, parse_size_output
from ..models.config import ProbeConfig


def create_probe(probe_config: ProbeConfig) -> DuSizeProbe:
    """Create the configured disk usage probe."""
    return DuSizeProbe(
        command=probe_config.command,
        unit_bytes=probe_config.unit_bytes,
        allow_partial=probe_config.allow_partial,
    )


__all__ = [
    "AsyncSizeProbe",
    "DuSizeProbe",
    "SizeProbe",
    "create_probe",
    "parse_size_output",
]
