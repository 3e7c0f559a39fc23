"""Fixed pool of deletion worker threads."""

import threading
import time
from typing import List

from domain.models import Job, JobBatch, DeletionResult
from domain.protocols import IDeletionBackend, IFailureSink, IMetricsCollector
from application.dispatcher import Dispatcher
from application.progress import ProgressReporter, DELETED
from shared.logging import get_logger

logger = get_logger(__name__)

FAILED = 'failed'


class DeleteWorker(threading.Thread):
    """Takes items from the dispatcher forever and deletes them."""

    def __init__(
        self,
        index: int,
        backend: IDeletionBackend,
        dispatcher: Dispatcher,
        sink: IFailureSink,
        metrics: IMetricsCollector,
        reporter: ProgressReporter
    ):
        super().__init__(name=f"delete-worker-{index}", daemon=True)
        self._backend = backend
        self._dispatcher = dispatcher
        self._sink = sink
        self._metrics = metrics
        self._reporter = reporter

    def run(self) -> None:
        while True:
            item = self._dispatcher.receive()
            try:
                self.process(item)
            except Exception as e:
                logger.exception(f"{self.name} failed to process {item!r}: {e}")
            finally:
                self._dispatcher.complete()

    def process(self, item) -> None:
        if isinstance(item, JobBatch):
            self._delete_batch(item)
        elif isinstance(item, Job):
            self._delete_job(item)
        else:
            logger.error(f"Unknown work item: {item!r}")

    def _delete_job(self, job: Job) -> None:
        result = self._call(self._backend.delete_object, job.bucket, job.deletion_id)

        if result.success:
            deleted = self._metrics.increment_counter(DELETED)
            self._reporter.report(deleted)
            return

        self._metrics.increment_counter(FAILED)
        logger.warning(f"Object not removed: s3://{job.bucket}/{job.deletion_id} ({result.error})")
        self._sink.append(job)

    def _delete_batch(self, batch: JobBatch) -> None:
        result = self._call(self._backend.delete_objects, batch.bucket, batch.keys)

        if result.success:
            deleted = self._metrics.increment_counter(DELETED, len(batch))
            self._reporter.report(deleted)
            return

        self._metrics.increment_counter(FAILED, len(batch))
        logger.error(f"Batch of {len(batch)} objects not removed from {batch.bucket} ({result.error})")
        for job in batch:
            self._sink.append(job)

    def _call(self, operation, *args) -> DeletionResult:
        try:
            return operation(*args)
        except Exception as e:
            logger.exception(f"Deletion backend raised: {e}")
            return DeletionResult.failed(str(e))


class WorkerPool:
    """Starts a fixed number of daemon workers that are never joined."""

    def __init__(
        self,
        backend: IDeletionBackend,
        dispatcher: Dispatcher,
        sink: IFailureSink,
        metrics: IMetricsCollector,
        reporter: ProgressReporter,
        size: int = 10,
        ramp_up_delay: float = 1.0
    ):
        if size < 1:
            raise ValueError(f"Pool size must be positive, got: {size}")

        self._backend = backend
        self._dispatcher = dispatcher
        self._sink = sink
        self._metrics = metrics
        self._reporter = reporter
        self.size = size
        self.ramp_up_delay = ramp_up_delay
        self.workers: List[DeleteWorker] = []

    def start(self, sleep=time.sleep) -> None:
        """
        Launch the workers, pausing ramp_up_delay seconds between starts to
        avoid a burst of simultaneous connections against the store.
        """
        if self.workers:
            return

        for index in range(self.size):
            if index > 0 and self.ramp_up_delay > 0:
                sleep(self.ramp_up_delay)

            worker = DeleteWorker(
                index,
                self._backend,
                self._dispatcher,
                self._sink,
                self._metrics,
                self._reporter
            )
            worker.start()
            self.workers.append(worker)

        logger.info(f"Started {self.size} workers")

    @property
    def alive(self) -> int:
        return sum(1 for worker in self.workers if worker.is_alive())
