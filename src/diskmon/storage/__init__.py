"""
Storage of sample series.

- RecordSink: interface of output backends
- TsvRecordSink: tab-separated rows on stdout or in a file
- ParquetRecordSink: columnar file for later analysis with Polars
- create_sink / load_samples: factory and reader
"""

from .base import RecordSink
from .factory import create_sink, load_samples
from .parquet_sink import ParquetRecordSink, samples_to_dataframe
from .tsv_sink import TsvRecordSink, format_sample

__all__ = [
    "ParquetRecordSink",
    "RecordSink",
    "TsvRecordSink",
    "create_sink",
    "format_sample",
    "load_samples",
    "samples_to_dataframe",
]
