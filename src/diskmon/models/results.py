"""
Result data models.

This module contains the records produced by a monitoring session: one
immutable Sample per measurement and a SessionSummary at the end.
"""

from dataclasses import dataclass
from typing import Optional

# Column order of every output format.
SAMPLE_FIELDS = ("elapsed_seconds", "usage_bytes", "delta_bytes", "peak_bytes")


@dataclass(frozen=True)
class Sample:
    """
    Disk usage of the monitored directory at one point in time.

    Attributes:
        elapsed: Seconds since the session started (monotonic clock).
        usage_bytes: Measured size of the directory.
        delta_bytes: usage_bytes minus the session baseline; may be negative.
        peak_bytes: Largest usage_bytes seen so far, this sample included.
    """

    elapsed: float
    usage_bytes: int
    delta_bytes: int
    peak_bytes: int

    def as_row(self) -> dict:
        """Return the sample keyed by output column name."""
        return {
            "elapsed_seconds": self.elapsed,
            "usage_bytes": self.usage_bytes,
            "delta_bytes": self.delta_bytes,
            "peak_bytes": self.peak_bytes,
        }


@dataclass
class SessionSummary:
    """
    Outcome of one monitoring session.
    """

    # Exit status of the monitored command (128 + N when killed by signal N).
    exit_code: int
    # Rows written to the sink, the finalization sample included.
    samples_emitted: int = 0
    # Ticks whose probe failed and produced no row.
    probe_failures: int = 0
    # Whether the sample taken at command exit was written.
    final_sample_emitted: bool = False
    baseline_bytes: Optional[int] = None
    final_usage_bytes: Optional[int] = None
    peak_bytes: Optional[int] = None
    duration_seconds: float = 0.0

    @property
    def final_delta_bytes(self) -> Optional[int]:
        """Net change of the directory size over the session."""
        if self.baseline_bytes is None or self.final_usage_bytes is None:
            return None
        return self.final_usage_bytes - self.baseline_bytes

    def format_report(self) -> str:
        """Render the summary as a short multi-line report."""
        lines = [
            "Session summary:",
            f"  Exit code: {self.exit_code}",
            f"  Duration: {self.duration_seconds:.3f} seconds",
            f"  Samples: {self.samples_emitted} ({self.probe_failures} probe failures)",
        ]
        if self.baseline_bytes is not None:
            lines.append(f"  Baseline: {self.baseline_bytes} bytes")
            lines.append(f"  Peak: {self.peak_bytes} bytes")
            if self.final_usage_bytes is not None:
                lines.append(
                    f"  Final: {self.final_usage_bytes} bytes (delta {self.final_delta_bytes:+d})"
                )
            else:
                lines.append("  Final: not measured")
        else:
            lines.append("  No successful samples")
        return "\n".join(lines)
