"""Turns input lines into deletion jobs and routes them to the workers."""

from typing import Iterable, List, Optional

from domain.models import Job, JobBatch, IngestStats
from domain.protocols import IDispatcher
from shared.logging import get_logger

logger = get_logger(__name__)

MIN_FIELDS = 4


class FileIngestor:
    """
    Parses ``bucket,raw id,preview id,name`` lines into jobs.

    With batch_size 0 every job is sent on its own. Otherwise jobs are grouped
    into batches of batch_size; a change of bucket closes the current batch
    early so each batch targets a single bucket, and the remainder is flushed
    at end of input.
    """

    def __init__(
        self,
        lines: Iterable[str],
        dispatcher: IDispatcher,
        batch_size: int = 0,
        prefix: str = "",
        separator: str = ","
    ):
        if batch_size < 0:
            raise ValueError(f"Batch size cannot be negative, got: {batch_size}")
        if not separator:
            raise ValueError("Separator cannot be empty")

        self._lines = lines
        self._dispatcher = dispatcher
        self.batch_size = batch_size
        self.prefix = prefix
        self.separator = separator

    def build_id(self, raw_id: str) -> str:
        return self.prefix + raw_id

    def parse_line(self, line: str) -> Optional[Job]:
        """Return the job described by line, or None for a malformed line."""
        fields = line.split(self.separator)
        if len(fields) < MIN_FIELDS:
            logger.warning(f"Ignored small element: {line!r}")
            return None

        return Job(
            bucket=fields[0],
            object_key=fields[1],
            deletion_id=self.build_id(fields[2]),
            display_name=fields[3],
        )

    def run(self) -> IngestStats:
        """
        Read every line and hand the resulting work to the dispatcher.

        Blocks on each send until a worker accepts the item.

        Raises:
            InputFileError: If the underlying reader cannot be read
        """
        stats = IngestStats()
        buffer: List[Job] = []

        for line in self._lines:
            stats.lines += 1
            job = self.parse_line(line)
            if job is None:
                stats.skipped += 1
                continue
            stats.jobs += 1

            if self.batch_size == 0:
                self._dispatcher.send_job(job)
                continue

            if buffer and buffer[0].bucket != job.bucket:
                self._flush(buffer, stats)
                buffer = []

            buffer.append(job)
            if len(buffer) == self.batch_size:
                self._flush(buffer, stats)
                buffer = []

        if buffer:
            self._flush(buffer, stats)

        logger.info(
            f"Ending reading file: {stats.lines} lines, {stats.jobs} jobs, "
            f"{stats.skipped} skipped, {stats.batches} batches"
        )
        return stats

    def _flush(self, buffer: List[Job], stats: IngestStats) -> None:
        self._dispatcher.send_batch(JobBatch(buffer))
        stats.batches += 1
