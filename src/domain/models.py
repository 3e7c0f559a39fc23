"""Domain models for bulk object deletion."""

from dataclasses import dataclass
from typing import Optional, Tuple, Iterable, List


@dataclass(frozen=True)
class Job:
    """One object scheduled for deletion."""

    bucket: str
    object_key: str
    deletion_id: str
    display_name: str

    def to_row(self) -> List[str]:
        """Fields in failure-file order: bucket, raw id, deletion id, name."""
        return [self.bucket, self.object_key, self.deletion_id, self.display_name]


@dataclass(frozen=True, init=False)
class JobBatch:
    """Ordered, non-empty group of jobs that share one bucket."""

    jobs: Tuple[Job, ...]

    def __init__(self, jobs: Iterable[Job]):
        jobs = tuple(jobs)
        if not jobs:
            raise ValueError("JobBatch requires at least one job")

        buckets = {job.bucket for job in jobs}
        if len(buckets) > 1:
            raise ValueError(f"JobBatch spans multiple buckets: {sorted(buckets)}")

        object.__setattr__(self, 'jobs', jobs)

    @property
    def bucket(self) -> str:
        return self.jobs[0].bucket

    @property
    def keys(self) -> List[str]:
        """Deletion ids in input order."""
        return [job.deletion_id for job in self.jobs]

    def __len__(self) -> int:
        return len(self.jobs)

    def __iter__(self):
        return iter(self.jobs)


@dataclass
class DeletionResult:
    """Outcome of a single or multi-key delete request."""

    success: bool
    deleted: int = 0
    error: Optional[str] = None

    @classmethod
    def ok(cls, deleted: int = 1) -> 'DeletionResult':
        return cls(success=True, deleted=deleted)

    @classmethod
    def failed(cls, error: str) -> 'DeletionResult':
        return cls(success=False, deleted=0, error=error)


@dataclass
class IngestStats:
    """Counts gathered while reading the input file."""

    lines: int = 0
    jobs: int = 0
    skipped: int = 0
    batches: int = 0


@dataclass
class RunSummary:
    """Final figures of a bulk deletion run."""

    deleted: int
    failed: int
    skipped: int
    elapsed_seconds: float

    @property
    def mean_rate(self) -> float:
        """Mean deletions per second over the whole run."""
        if self.elapsed_seconds <= 0:
            return 0.0
        return self.deleted / self.elapsed_seconds
