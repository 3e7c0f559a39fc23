"""Main orchestrator for a bulk deletion run."""

from typing import Optional, Iterable

from domain.models import RunSummary
from domain.protocols import IDeletionBackend, IFailureSink
from infrastructure.config import RunConfig
from infrastructure.io import LineReader
from application.dispatcher import Dispatcher
from application.ingestor import FileIngestor
from application.progress import ProgressReporter, ProgressMonitor, DELETED
from application.worker_pool import WorkerPool, FAILED
from shared.logging import get_logger
from shared.metrics import MetricsCollector

logger = get_logger(__name__)

SKIPPED = 'skipped'


class BulkDeleteOrchestrator:
    """
    Coordinates one run: start the pool, feed it, wait for idle completion.

    Workers are daemon threads and are left running after run() returns;
    they hold nothing that needs flushing. The failure sink is closed on
    every exit path.
    """

    def __init__(
        self,
        config: RunConfig,
        backend: IDeletionBackend,
        sink: IFailureSink,
        metrics: Optional[MetricsCollector] = None,
        lines: Optional[Iterable[str]] = None
    ):
        self._config = config
        self._backend = backend
        self._sink = sink
        self._metrics = metrics or MetricsCollector()
        self._lines = lines

        self.dispatcher = Dispatcher()
        self.reporter = ProgressReporter(
            self._metrics,
            batch_mode=config.batch_mode,
            pivot=config.progress_pivot
        )
        self.pool = WorkerPool(
            backend=backend,
            dispatcher=self.dispatcher,
            sink=sink,
            metrics=self._metrics,
            reporter=self.reporter,
            size=config.workers,
            ramp_up_delay=config.ramp_up_delay
        )
        self.monitor = ProgressMonitor(
            self._metrics,
            self.reporter,
            interval=config.idle_interval,
            is_busy=lambda: self.dispatcher.outstanding > 0
        )

    def _input_lines(self) -> Iterable[str]:
        if self._lines is not None:
            return self._lines
        reader = LineReader(self._config.input_path)
        reader.check()
        return reader

    def run(self) -> RunSummary:
        """
        Execute the run.

        Raises:
            InputFileError: If the input file cannot be read
        """
        config = self._config
        logger.info("Starting process")
        logger.info(
            f"Arguments: path={config.input_path}, endpoint={config.endpoint}, "
            f"workers={config.workers}, pivot={config.progress_pivot}, "
            f"batch_size={config.batch_size}, output={config.output_path}, "
            f"prefix={config.prefix!r}"
        )

        try:
            lines = self._input_lines()

            self.pool.start()

            ingestor = FileIngestor(
                lines,
                self.dispatcher,
                batch_size=config.batch_size,
                prefix=config.prefix,
                separator=config.separator
            )
            self._metrics.start_timer('ingest')
            stats = ingestor.run()
            ingest_seconds = self._metrics.stop_timer('ingest')
            logger.info(f"Input consumed in {ingest_seconds:.1f}s")
            self._metrics.increment_counter(SKIPPED, stats.skipped)

            logger.info("Waiting to finish")
            self.monitor.start()
            self.monitor.wait()
        finally:
            self.monitor.stop()
            self._sink.close()

        summary = RunSummary(
            deleted=self._metrics.get_counter(DELETED),
            failed=self._metrics.get_counter(FAILED),
            skipped=self._metrics.get_counter(SKIPPED),
            elapsed_seconds=self._metrics.elapsed_time()
        )
        logger.debug(f"Run counters: {self._metrics.get_summary()}")
        logger.info("Terminating program")
        return summary
