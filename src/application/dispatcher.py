"""Rendezvous handoff between the ingestor and the worker pool."""

import queue
import threading
from typing import Optional, Union

from domain.models import Job, JobBatch

WorkItem = Union[Job, JobBatch]


class Dispatcher:
    """
    Unbuffered channel carrying single jobs and batches in one FIFO stream.
    Implements IDispatcher protocol.

    A send returns only after a worker has taken the item, so the producer can
    never run ahead of the pool. Items of both kinds share the queue and are
    served in send order.

    ``outstanding`` counts items handed over but not yet reported finished
    through complete(); it is raised before the handoff so there is no window
    where a received item is invisible.
    """

    def __init__(self):
        self._queue: "queue.Queue[WorkItem]" = queue.Queue(maxsize=1)
        self._lock = threading.Lock()
        self._outstanding = 0
        self._sent_jobs = 0
        self._sent_batches = 0

    def send_job(self, job: Job) -> None:
        """Hand over a single job, blocking until a worker takes it."""
        self._send(job)
        with self._lock:
            self._sent_jobs += 1

    def send_batch(self, batch: JobBatch) -> None:
        """Hand over a batch, blocking until a worker takes it."""
        self._send(batch)
        with self._lock:
            self._sent_batches += 1

    def _send(self, item: WorkItem) -> None:
        with self._lock:
            self._outstanding += 1
        self._queue.put(item)
        # Workers acknowledge receipt with task_done() right after get()
        self._queue.join()

    def receive(self, timeout: Optional[float] = None) -> WorkItem:
        """
        Take the next item.

        Raises:
            queue.Empty: If timeout expires before an item arrives
        """
        item = self._queue.get(timeout=timeout)
        self._queue.task_done()
        return item

    def complete(self) -> None:
        """Report that a received item has been fully processed."""
        with self._lock:
            self._outstanding -= 1

    @property
    def outstanding(self) -> int:
        with self._lock:
            return self._outstanding

    @property
    def sent_jobs(self) -> int:
        with self._lock:
            return self._sent_jobs

    @property
    def sent_batches(self) -> int:
        with self._lock:
            return self._sent_batches
