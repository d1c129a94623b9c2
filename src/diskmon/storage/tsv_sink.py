"""
Tab-separated output of samples.

The header row is written together with the first sample, so a session
that produced no samples leaves its destination empty. Every row is
flushed immediately so that long sessions can be followed with `tail -f`.
"""

import logging
import sys
from pathlib import Path
from typing import Optional, TextIO, Union

from ..models.results import SAMPLE_FIELDS, Sample
from ..validation import SinkWriteError
from .base import RecordSink

logger = logging.getLogger(__name__)


def format_sample(sample: Sample, float_precision: int = 3) -> str:
    """
    Render one sample as a TSV line, newline included.

    Examples:
        >>> format_sample(Sample(1.5, 2048, -1024, 3072))
        '1.500\\t2048\\t-1024\\t3072\\n'
    """
    return (
        f"{sample.elapsed:.{float_precision}f}\t{sample.usage_bytes}\t"
        f"{sample.delta_bytes}\t{sample.peak_bytes}\n"
    )


class TsvRecordSink(RecordSink):
    """
    Writes samples as TSV rows to a text stream.
    """

    def __init__(
        self,
        stream: TextIO,
        float_precision: int = 3,
        close_stream: bool = False,
        destination: Optional[str] = None,
    ):
        """
        Args:
            stream: Text stream to write to
            float_precision: Decimal places of the elapsed_seconds column
            close_stream: Close the stream in close(); True for files we opened
            destination: Name of the destination for error messages
        """
        self.stream = stream
        self.float_precision = float_precision
        self.close_stream = close_stream
        self.destination = destination or getattr(stream, "name", "<stream>")
        self._header_written = False
        self._rows = 0
        self._closed = False

    @classmethod
    def open(cls, path: Union[str, Path], float_precision: int = 3) -> "TsvRecordSink":
        """
        Create a sink writing to a file, truncating it.

        Raises:
            SinkWriteError: If the file cannot be opened for writing
        """
        try:
            stream = open(path, "w", encoding="utf-8", newline="")
        except OSError as e:
            raise SinkWriteError(f"cannot open {path} for writing: {e}", destination=str(path)) from e
        return cls(stream, float_precision=float_precision, close_stream=True, destination=str(path))

    @classmethod
    def stdout(cls, float_precision: int = 3) -> "TsvRecordSink":
        """Create a sink writing to standard output."""
        return cls(sys.stdout, float_precision=float_precision, destination="<stdout>")

    @property
    def rows_written(self) -> int:
        return self._rows

    def write(self, sample: Sample) -> None:
        if self._closed:
            raise SinkWriteError("sink is closed", destination=self.destination)

        text = format_sample(sample, self.float_precision)
        if not self._header_written:
            text = "\t".join(SAMPLE_FIELDS) + "\n" + text
        try:
            self.stream.write(text)
            self.stream.flush()
        except (OSError, ValueError) as e:
            raise SinkWriteError(
                f"cannot write to {self.destination}: {e}", destination=self.destination
            ) from e
        self._header_written = True
        self._rows += 1

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        try:
            if self.close_stream:
                self.stream.close()
            else:
                self.stream.flush()
        except (OSError, ValueError) as e:
            raise SinkWriteError(
                f"cannot flush {self.destination}: {e}", destination=self.destination
            ) from e
        logger.debug(f"TSV sink closed after {self._rows} rows ({self.destination})")
