"""Domain layer package."""

from .models import Job, JobBatch, DeletionResult, IngestStats, RunSummary
from .exceptions import (
    DomainException,
    ConfigurationError,
    InputFileError,
    FailureSinkError,
    BackendNotAvailableError,
)
from .protocols import (
    IDeletionBackend,
    IFailureSink,
    IDispatcher,
    IMetricsCollector,
)

__all__ = [
    # Models
    "Job",
    "JobBatch",
    "DeletionResult",
    "IngestStats",
    "RunSummary",
    # Exceptions
    "DomainException",
    "ConfigurationError",
    "InputFileError",
    "FailureSinkError",
    "BackendNotAvailableError",
    # Protocols
    "IDeletionBackend",
    "IFailureSink",
    "IDispatcher",
    "IMetricsCollector",
]
