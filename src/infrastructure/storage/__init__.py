"""Storage infrastructure."""

from infrastructure.storage.failure_sink import CsvFailureSink

__all__ = ['CsvFailureSink']
