"""
Unit tests for ParquetRecordSink.
"""

import polars as pl
import pytest

from diskmon.models.results import Sample
from diskmon.storage import ParquetRecordSink, samples_to_dataframe
from diskmon.validation import SinkWriteError


@pytest.fixture
def samples():
    return [
        Sample(1.0, 100, 0, 100),
        Sample(2.0, 150, 50, 150),
        Sample(3.0, 120, 20, 150),
    ]


@pytest.mark.unit
class TestParquetRecordSink:
    """Test cases for ParquetRecordSink."""

    def test_initialization(self, temp_dir):
        sink = ParquetRecordSink(temp_dir / "out.parquet")

        assert sink.compression == "snappy"
        assert sink.rows_written == 0
        assert (temp_dir / "out.parquet").exists()

    def test_write_and_close(self, temp_dir, samples):
        path = temp_dir / "out.parquet"
        with ParquetRecordSink(path, compression="zstd") as sink:
            for sample in samples:
                sink.write(sample)

        df = pl.read_parquet(path)
        assert df.columns == ["elapsed_seconds", "usage_bytes", "delta_bytes", "peak_bytes"]
        assert df["usage_bytes"].to_list() == [100, 150, 120]
        assert df["peak_bytes"].to_list() == [100, 150, 150]
        assert df["elapsed_seconds"].dtype == pl.Float64

    def test_checkpoint_writes_before_close(self, temp_dir, samples):
        path = temp_dir / "out.parquet"
        sink = ParquetRecordSink(path, checkpoint_rows=2)
        sink.write(samples[0])
        sink.write(samples[1])

        assert len(pl.read_parquet(path)) == 2

        sink.write(samples[2])
        sink.close()
        assert len(pl.read_parquet(path)) == 3

    def test_empty_session(self, temp_dir):
        path = temp_dir / "out.parquet"
        ParquetRecordSink(path).close()

        df = pl.read_parquet(path)
        assert df.is_empty()
        assert df.schema["delta_bytes"] == pl.Int64

    def test_unwritable_destination(self, temp_dir):
        with pytest.raises(SinkWriteError):
            ParquetRecordSink(temp_dir / "missing-dir" / "out.parquet")

    def test_write_after_close(self, temp_dir, samples):
        sink = ParquetRecordSink(temp_dir / "out.parquet")
        sink.close()

        with pytest.raises(SinkWriteError, match="closed"):
            sink.write(samples[0])

    def test_samples_to_dataframe(self, samples):
        df = samples_to_dataframe(samples)

        assert df.shape == (3, 4)
        assert df["delta_bytes"].to_list() == [0, 50, 20]

    def test_samples_to_dataframe_keeps_row_values(self, samples):
        df = samples_to_dataframe(samples)

        assert df.columns == ["elapsed_seconds", "usage_bytes", "delta_bytes", "peak_bytes"]
        assert df.row(2, named=True) == samples[2].as_row()
        assert df.schema["usage_bytes"] == pl.Int64

    def test_samples_to_dataframe_empty(self):
        df = samples_to_dataframe([])

        assert df.shape == (0, 4)
        assert df.schema["elapsed_seconds"] == pl.Float64
