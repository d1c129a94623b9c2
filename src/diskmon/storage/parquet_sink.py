"""
Parquet output of samples using Polars.
"""

import logging
from pathlib import Path
from typing import List, Literal, Union

import polars as pl

from ..models.results import SAMPLE_FIELDS, Sample
from ..validation import SinkWriteError
from .base import RecordSink

logger = logging.getLogger(__name__)

SAMPLE_SCHEMA = {
    "elapsed_seconds": pl.Float64,
    "usage_bytes": pl.Int64,
    "delta_bytes": pl.Int64,
    "peak_bytes": pl.Int64,
}


def samples_to_dataframe(samples: List[Sample]) -> pl.DataFrame:
    """Build a DataFrame with one row per sample and the standard columns."""
    return pl.DataFrame([s.as_row() for s in samples], schema=SAMPLE_SCHEMA)


class ParquetRecordSink(RecordSink):
    """
    Collects samples and writes them to a Parquet file.

    Parquet files cannot be appended to, so the whole series is rewritten
    every `checkpoint_rows` samples and once more on close. A crash loses
    at most the samples since the last checkpoint.
    """

    def __init__(
        self,
        path: Union[str, Path],
        compression: Literal["snappy", "gzip", "brotli", "lz4", "zstd", "uncompressed"] = "snappy",
        checkpoint_rows: int = 60,
    ):
        """
        Args:
            path: Destination file
            compression: Parquet compression codec
            checkpoint_rows: Rewrite the file after this many new samples

        Raises:
            SinkWriteError: If the destination is not writable
        """
        self.path = Path(path)
        self.compression = compression
        self.checkpoint_rows = checkpoint_rows
        self._samples: List[Sample] = []
        self._unsaved = 0
        self._closed = False

        try:
            self.path.touch()
        except OSError as e:
            raise SinkWriteError(
                f"cannot open {self.path} for writing: {e}", destination=str(self.path)
            ) from e
        logger.debug(f"Initialized ParquetRecordSink at {self.path} with compression: {compression}")

    @property
    def rows_written(self) -> int:
        return len(self._samples)

    def write(self, sample: Sample) -> None:
        if self._closed:
            raise SinkWriteError("sink is closed", destination=str(self.path))
        self._samples.append(sample)
        self._unsaved += 1
        if self._unsaved >= self.checkpoint_rows:
            self._save()

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._save()
        logger.debug(f"Parquet sink closed after {len(self._samples)} rows ({self.path})")

    def _save(self) -> None:
        df = samples_to_dataframe(self._samples)
        try:
            df.write_parquet(self.path, compression=self.compression)
        except Exception as e:
            logger.error(f"Failed to save samples to {self.path}: {e}")
            raise SinkWriteError(
                f"cannot write {self.path}: {e}", destination=str(self.path)
            ) from e
        self._unsaved = 0


__all__ = ["ParquetRecordSink", "SAMPLE_SCHEMA", "SAMPLE_FIELDS", "samples_to_dataframe"]
