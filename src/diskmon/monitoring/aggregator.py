"""
Per-session aggregation of raw disk usage readings into samples.

The session state (baseline, running peak) lives in an explicit
MonitorSession object, so several sessions can coexist in one process.
"""

import logging
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from ..models.results import Sample

logger = logging.getLogger(__name__)


@dataclass
class MonitorSession:
    """
    Transient state of one monitoring session.

    Created when monitoring starts and discarded when it ends. Only the
    sampling coroutine mutates it, so it needs no locking.
    """

    # Directory whose size is sampled.
    target_path: Path
    # Sampling period in seconds.
    interval_seconds: float
    # Monotonic clock reading at session start; elapsed times count from here.
    start_time: float = field(default_factory=time.monotonic)
    # Usage of the first successful sample, set once.
    baseline_bytes: Optional[int] = None
    # Largest usage seen so far.
    peak_bytes: Optional[int] = None
    # Usage of the most recent sample.
    last_usage_bytes: Optional[int] = None
    # Elapsed time of the most recent sample.
    last_elapsed: Optional[float] = None
    sample_count: int = 0

    def elapsed(self, now: Optional[float] = None) -> float:
        """Seconds since session start, never negative."""
        if now is None:
            now = time.monotonic()
        return max(0.0, now - self.start_time)


class Aggregator:
    """
    Turns raw usage readings into Samples with delta and running peak.
    """

    def __init__(self, session: MonitorSession):
        self.session = session

    def update(self, raw_usage: int, elapsed: float) -> Sample:
        """
        Record a reading and build the corresponding Sample.

        The first reading becomes the session baseline, so the first
        sample's delta is always 0. The peak never decreases.

        Args:
            raw_usage: Measured size in bytes
            elapsed: Seconds since session start of the measurement

        Returns:
            The new Sample

        Raises:
            ValueError: If raw_usage is negative or elapsed goes backwards;
                both are caller bugs, not runtime conditions.
        """
        session = self.session
        if raw_usage < 0:
            raise ValueError(f"raw_usage must be non-negative, got {raw_usage}")
        if elapsed < 0:
            raise ValueError(f"elapsed must be non-negative, got {elapsed}")
        if session.last_elapsed is not None and elapsed < session.last_elapsed:
            raise ValueError(
                f"elapsed went backwards: {elapsed} after {session.last_elapsed}"
            )

        if session.baseline_bytes is None:
            session.baseline_bytes = raw_usage
            logger.debug(f"Baseline for {session.target_path}: {raw_usage} bytes")

        if session.peak_bytes is None or raw_usage > session.peak_bytes:
            session.peak_bytes = raw_usage

        session.last_usage_bytes = raw_usage
        session.last_elapsed = elapsed
        session.sample_count += 1

        return Sample(
            elapsed=elapsed,
            usage_bytes=raw_usage,
            delta_bytes=raw_usage - session.baseline_bytes,
            peak_bytes=session.peak_bytes,
        )
