"""Application layer package."""

from application.dispatcher import Dispatcher
from application.ingestor import FileIngestor
from application.worker_pool import WorkerPool, DeleteWorker
from application.progress import ProgressReporter, ProgressMonitor
from application.orchestrator import BulkDeleteOrchestrator
from application.factories import BackendFactory

__all__ = [
    "Dispatcher",
    "FileIngestor",
    "WorkerPool",
    "DeleteWorker",
    "ProgressReporter",
    "ProgressMonitor",
    "BulkDeleteOrchestrator",
    "BackendFactory",
]
