"""Protocol definitions for dependency inversion."""

from typing import Protocol, List, Optional, Union
from .models import Job, JobBatch, DeletionResult


class IDeletionBackend(Protocol):
    """Interface for deleting objects from an S3-compatible store."""

    def delete_object(self, bucket: str, key: str) -> DeletionResult:
        """Delete a single object."""
        ...

    def delete_objects(self, bucket: str, keys: List[str]) -> DeletionResult:
        """Delete several objects of one bucket in a single request."""
        ...


class IFailureSink(Protocol):
    """Interface for recording jobs that could not be deleted."""

    def append(self, job: Job) -> None:
        """Record one failed job."""
        ...

    def close(self) -> None:
        """Flush and close the sink."""
        ...


class IDispatcher(Protocol):
    """Interface for handing work from the ingestor to the workers."""

    def send_job(self, job: Job) -> None:
        """Hand over a single job, blocking until a worker takes it."""
        ...

    def send_batch(self, batch: JobBatch) -> None:
        """Hand over a batch, blocking until a worker takes it."""
        ...

    def receive(self, timeout: Optional[float] = None) -> Union[Job, JobBatch]:
        """Take the next item."""
        ...


class IMetricsCollector(Protocol):
    """Interface for collecting run counters."""

    def increment_counter(self, name: str, amount: int = 1) -> int:
        """Increment a counter and return its new value."""
        ...

    def get_counter(self, name: str) -> int:
        """Get counter value."""
        ...

    def elapsed_time(self) -> float:
        """Get total elapsed time since start."""
        ...
