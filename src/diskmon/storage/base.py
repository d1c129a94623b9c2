"""
Abstract base class for record sinks.

A record sink receives the samples of a session in order and persists them.
Implementations must raise SinkWriteError when data cannot be written; the
monitoring loop treats that as fatal rather than silently losing samples.
"""

from abc import ABC, abstractmethod

from ..models.results import Sample


class RecordSink(ABC):
    """Abstract base class for sample output backends."""

    @abstractmethod
    def write(self, sample: Sample) -> None:
        """
        Persist one sample.

        Args:
            sample: The next sample of the session

        Raises:
            SinkWriteError: If the sample could not be written
        """
        pass

    @abstractmethod
    def close(self) -> None:
        """
        Flush pending data and release the destination.

        Raises:
            SinkWriteError: If pending data could not be written
        """
        pass

    @property
    @abstractmethod
    def rows_written(self) -> int:
        """Number of samples accepted so far."""
        pass

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
