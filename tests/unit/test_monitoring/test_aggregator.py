"""
Unit tests for the per-session aggregation of usage readings.
"""

from pathlib import Path

import pytest

from diskmon.monitoring.aggregator import Aggregator, MonitorSession


def make_aggregator():
    session = MonitorSession(target_path=Path("/data"), interval_seconds=1.0, start_time=0.0)
    return Aggregator(session), session


@pytest.mark.unit
class TestAggregator:
    """Test cases for Aggregator.update."""

    def test_first_sample_sets_baseline(self):
        aggregator, session = make_aggregator()

        sample = aggregator.update(4096, 0.5)

        assert session.baseline_bytes == 4096
        assert sample.delta_bytes == 0
        assert sample.peak_bytes == 4096
        assert sample.usage_bytes == 4096
        assert sample.elapsed == 0.5

    def test_scripted_series(self):
        """Deltas are relative to the first sample; the peak never drops."""
        aggregator, _ = make_aggregator()

        samples = [
            aggregator.update(usage, float(i))
            for i, usage in enumerate([100, 150, 120, 200])
        ]

        assert [s.delta_bytes for s in samples] == [0, 50, 20, 100]
        assert [s.peak_bytes for s in samples] == [100, 150, 150, 200]

    def test_negative_delta_when_directory_shrinks(self):
        aggregator, session = make_aggregator()

        aggregator.update(1000, 0.0)
        sample = aggregator.update(400, 1.0)

        assert sample.delta_bytes == -600
        assert sample.peak_bytes == 1000
        assert session.baseline_bytes == 1000

    def test_peak_monotonic_over_long_series(self):
        aggregator, _ = make_aggregator()
        readings = [5, 3, 9, 9, 1, 12, 0, 11]

        peaks = [aggregator.update(r, float(i)).peak_bytes for i, r in enumerate(readings)]

        assert peaks == sorted(peaks)
        for i, peak in enumerate(peaks):
            assert peak == max(readings[: i + 1])

    def test_equal_elapsed_is_accepted(self):
        aggregator, session = make_aggregator()

        aggregator.update(10, 1.0)
        aggregator.update(20, 1.0)

        assert session.sample_count == 2
        assert session.last_usage_bytes == 20

    def test_decreasing_elapsed_raises(self):
        aggregator, _ = make_aggregator()
        aggregator.update(10, 2.0)

        with pytest.raises(ValueError, match="backwards"):
            aggregator.update(10, 1.0)

    def test_negative_usage_raises(self):
        aggregator, session = make_aggregator()

        with pytest.raises(ValueError):
            aggregator.update(-1, 0.0)

        assert session.baseline_bytes is None

    def test_zero_usage_is_valid(self):
        aggregator, _ = make_aggregator()

        sample = aggregator.update(0, 0.0)

        assert sample.usage_bytes == 0
        assert sample.peak_bytes == 0


@pytest.mark.unit
class TestMonitorSession:
    """Test cases for MonitorSession."""

    def test_elapsed_relative_to_start(self):
        session = MonitorSession(target_path=Path("."), interval_seconds=1.0, start_time=100.0)

        assert session.elapsed(102.5) == 2.5

    def test_elapsed_never_negative(self):
        session = MonitorSession(target_path=Path("."), interval_seconds=1.0, start_time=100.0)

        assert session.elapsed(99.0) == 0.0

    def test_sessions_are_independent(self):
        first = Aggregator(MonitorSession(target_path=Path("a"), interval_seconds=1.0))
        second = Aggregator(MonitorSession(target_path=Path("b"), interval_seconds=1.0))

        first.update(100, 0.0)
        sample = second.update(500, 0.0)

        assert sample.delta_bytes == 0
        assert first.session.baseline_bytes == 100
        assert second.session.baseline_bytes == 500
