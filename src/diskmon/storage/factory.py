"""
Factory for creating record sinks, and the matching reader.
"""

import logging
from pathlib import Path
from typing import Literal, Optional, Union

import polars as pl

from ..validation import ValidationError
from .base import RecordSink
from .parquet_sink import SAMPLE_SCHEMA, ParquetRecordSink
from .tsv_sink import TsvRecordSink

logger = logging.getLogger(__name__)


def create_sink(
    format_type: Literal["tsv", "parquet"] = "tsv",
    output_path: Optional[Union[str, Path]] = None,
    float_precision: int = 3,
    compression: str = "snappy",
) -> RecordSink:
    """
    Create a record sink for the requested format and destination.

    Args:
        format_type: 'tsv' or 'parquet'
        output_path: Destination file, None for standard output
        float_precision: Decimal places of elapsed_seconds (TSV only)
        compression: Compression codec (Parquet only)

    Returns:
        RecordSink instance

    Raises:
        ValidationError: If the format is unknown or Parquet is requested
            without an output file
        SinkWriteError: If the destination cannot be opened
    """
    if format_type == "tsv":
        if output_path is None:
            logger.debug("Creating TSV sink on stdout")
            return TsvRecordSink.stdout(float_precision=float_precision)
        logger.debug(f"Creating TSV sink at {output_path}")
        return TsvRecordSink.open(output_path, float_precision=float_precision)
    elif format_type == "parquet":
        if output_path is None:
            raise ValidationError(
                "parquet output requires an output file (-o)",
                field_name="output",
                value=None,
            )
        logger.debug(f"Creating ParquetRecordSink at {output_path} with compression: {compression}")
        return ParquetRecordSink(output_path, compression=compression)
    else:
        raise ValidationError(
            f"Unsupported output format: {format_type}",
            field_name="output.format",
            value=format_type,
        )


def load_samples(path: Union[str, Path]) -> pl.DataFrame:
    """
    Load a sample series written by diskmon.

    Files ending in `.parquet` are read as Parquet, anything else as TSV.
    An empty TSV file (a session without samples) yields an empty frame.

    Args:
        path: File to load

    Returns:
        DataFrame with the elapsed_seconds, usage_bytes, delta_bytes and
        peak_bytes columns
    """
    path = Path(path)
    if path.suffix == ".parquet":
        df = pl.read_parquet(path)
    elif path.stat().st_size == 0:
        df = pl.DataFrame(schema=SAMPLE_SCHEMA)
    else:
        df = pl.read_csv(path, separator="\t")

    missing = [column for column in SAMPLE_SCHEMA if column not in df.columns]
    if missing:
        raise ValueError(f"{path} is missing columns: {', '.join(missing)}")

    logger.debug(f"Loaded {len(df)} samples from {path}")
    return df.select(list(SAMPLE_SCHEMA)).cast(SAMPLE_SCHEMA)
