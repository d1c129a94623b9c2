"""
Unit tests for the sink factory and the sample reader.
"""

import sys

import polars as pl
import pytest

from diskmon.models.results import Sample
from diskmon.storage import ParquetRecordSink, TsvRecordSink, create_sink, load_samples
from diskmon.validation import ValidationError


class TestSinkFactory:
    """Test cases for create_sink."""

    def test_tsv_to_stdout(self):
        sink = create_sink("tsv")
        assert isinstance(sink, TsvRecordSink)
        assert sink.stream is sys.stdout

    def test_tsv_to_file(self, temp_dir):
        sink = create_sink("tsv", temp_dir / "out.tsv", float_precision=1)
        try:
            assert isinstance(sink, TsvRecordSink)
            assert sink.float_precision == 1
        finally:
            sink.close()

    def test_parquet(self, temp_dir):
        sink = create_sink("parquet", temp_dir / "out.parquet", compression="gzip")
        assert isinstance(sink, ParquetRecordSink)
        assert sink.compression == "gzip"
        sink.close()

    def test_parquet_requires_path(self):
        with pytest.raises(ValidationError) as excinfo:
            create_sink("parquet")

        assert "requires an output file" in str(excinfo.value)

    def test_unsupported_format(self):
        with pytest.raises(ValidationError) as excinfo:
            create_sink("csv")

        assert "Unsupported output format" in str(excinfo.value)


class TestLoadSamples:
    """Test cases for load_samples."""

    def write_series(self, sink):
        with sink:
            sink.write(Sample(1.0, 100, 0, 100))
            sink.write(Sample(2.0, 50, -50, 100))

    def test_load_tsv(self, temp_dir):
        path = temp_dir / "out.tsv"
        self.write_series(create_sink("tsv", path))

        df = load_samples(path)

        assert df["delta_bytes"].to_list() == [0, -50]
        assert df.schema["usage_bytes"] == pl.Int64

    def test_load_parquet(self, temp_dir):
        path = temp_dir / "out.parquet"
        self.write_series(create_sink("parquet", path))

        df = load_samples(path)

        assert df["elapsed_seconds"].to_list() == [1.0, 2.0]

    def test_load_empty_tsv(self, temp_dir):
        path = temp_dir / "empty.tsv"
        path.write_text("")

        df = load_samples(path)

        assert df.is_empty()
        assert df.columns == ["elapsed_seconds", "usage_bytes", "delta_bytes", "peak_bytes"]

    def test_load_missing_columns(self, temp_dir):
        path = temp_dir / "other.tsv"
        path.write_text("a\tb\n1\t2\n")

        with pytest.raises(ValueError, match="missing columns"):
            load_samples(path)
