"""Progress reporting and idle-based completion detection."""

import threading
from typing import Callable, Optional

from domain.protocols import IMetricsCollector
from shared.logging import get_logger

logger = get_logger(__name__)

DELETED = 'deleted'


class ProgressReporter:
    """Logs mean deletion velocity."""

    def __init__(self, metrics: IMetricsCollector, batch_mode: bool, pivot: int):
        """
        Args:
            metrics: Shared run counters
            batch_mode: Report after every batch instead of every pivot deletions
            pivot: Single-mode reporting interval in deleted objects
        """
        self._metrics = metrics
        self._batch_mode = batch_mode
        self._pivot = pivot

    def should_report(self, deleted: int) -> bool:
        if self._batch_mode:
            return True
        return deleted % self._pivot == 0

    def report(self, deleted: Optional[int] = None, force: bool = False) -> bool:
        """
        Log progress if due.

        Args:
            deleted: Counter value observed by the caller; read fresh if None
            force: Report regardless of mode and pivot

        Returns:
            True if a line was logged
        """
        if deleted is None:
            deleted = self._metrics.get_counter(DELETED)

        if not (force or self.should_report(deleted)):
            return False

        seconds = self._metrics.elapsed_time()
        rate = round(deleted / seconds) if seconds > 0 else 0
        logger.info(f"Mean velocity: {rate} f/s -- Deleted: {deleted} files")
        return True


class ProgressMonitor:
    """
    Background ticker that declares the run complete once a full interval
    passes without a new deletion.

    An optional ``is_busy`` callable vetoes completion while items are still
    being processed.
    """

    def __init__(
        self,
        metrics: IMetricsCollector,
        reporter: ProgressReporter,
        interval: float = 15.0,
        is_busy: Optional[Callable[[], bool]] = None
    ):
        self._metrics = metrics
        self._reporter = reporter
        self.interval = interval
        self._is_busy = is_busy

        self._last_sample = metrics.get_counter(DELETED)
        self._completed = threading.Event()
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def last_sample(self) -> int:
        return self._last_sample

    @property
    def completed(self) -> bool:
        return self._completed.is_set()

    def start(self) -> None:
        """Start ticking in a daemon thread."""
        if self._thread is not None:
            return

        self._last_sample = self._metrics.get_counter(DELETED)
        self._thread = threading.Thread(target=self._run, name="progress-monitor", daemon=True)
        self._thread.start()
        logger.debug(f"Progress monitor started (interval={self.interval}s)")

    def _run(self) -> None:
        while not self._stop.wait(self.interval):
            if self.tick():
                return

    def tick(self) -> bool:
        """
        Take one sample.

        Returns:
            True if this sample completed the run
        """
        if self._completed.is_set():
            return True

        current = self._metrics.get_counter(DELETED)
        busy = self._is_busy() if self._is_busy else False

        if current == self._last_sample and not busy:
            self._finish(current)
            return True

        if current == self._last_sample:
            logger.debug("No deletions in the last interval, work still in flight")
        self._last_sample = current
        return False

    def _finish(self, deleted: int) -> None:
        seconds = self._metrics.elapsed_time()
        self._reporter.report(deleted, force=True)
        rate = deleted / seconds if seconds > 0 else 0.0
        logger.info(f"Finished after {seconds:.1f}s: {deleted} files deleted, mean {rate:.1f} f/s")
        self._completed.set()

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Block until completion; returns False if timeout expired first."""
        return self._completed.wait(timeout)

    def stop(self) -> None:
        """Stop the ticker thread."""
        self._stop.set()
        if self._thread is not None and self._thread is not threading.current_thread():
            self._thread.join(timeout=self.interval + 1)
