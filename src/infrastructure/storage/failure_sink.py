"""Durable record of jobs that could not be deleted."""

import csv
import threading
from pathlib import Path
from typing import Optional

from domain.models import Job
from domain.exceptions import FailureSinkError
from shared.logging import get_logger
from shared.types import PathLike

logger = get_logger(__name__)


class CsvFailureSink:
    """
    Append-only CSV file of failed jobs.
    Implements IFailureSink protocol.

    Rows use the input file layout (bucket, raw id, deletion id, name), so the
    file can be fed back as the input of a later run. The deletion id already
    carries the prefix, so that run must use an empty prefix. Writers are
    serialized by a lock; close() flushes and closes exactly once.
    """

    def __init__(self, output_path: PathLike):
        """
        Create (truncate) the failure file.

        Args:
            output_path: Path of the CSV file

        Raises:
            FailureSinkError: If the file cannot be created
        """
        self.output_path = Path(output_path)
        self._lock = threading.Lock()
        self._count = 0
        self._closed = False
        self._logger = get_logger(__name__)

        try:
            self.output_path.parent.mkdir(parents=True, exist_ok=True)
            self._file = open(self.output_path, 'w', newline='', encoding='utf-8')
        except OSError as e:
            raise FailureSinkError(f"Failed creating file {self.output_path}: {e}") from e

        self._writer = csv.writer(self._file)

    def append(self, job: Job) -> None:
        """Write one failed job."""
        with self._lock:
            if self._closed:
                raise FailureSinkError(f"Failure file already closed: {self.output_path}")
            try:
                self._writer.writerow(job.to_row())
            except OSError as e:
                raise FailureSinkError(f"Failed writing to {self.output_path}: {e}") from e
            self._count += 1

    @property
    def count(self) -> int:
        """Rows written so far."""
        with self._lock:
            return self._count

    @property
    def closed(self) -> bool:
        with self._lock:
            return self._closed

    def close(self) -> None:
        """Flush and close the file; later calls do nothing."""
        with self._lock:
            if self._closed:
                return
            self._closed = True
            try:
                self._file.flush()
            finally:
                self._file.close()

        self._logger.info(f"Failure file closed: {self.output_path} ({self._count} rows)")

    def __enter__(self) -> 'CsvFailureSink':
        return self

    def __exit__(self, exc_type, exc, tb) -> Optional[bool]:
        self.close()
        return None
