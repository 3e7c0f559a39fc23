"""Infrastructure layer package."""

from infrastructure.config import ConfigLoader, RunConfig
from infrastructure.io import LineReader
from infrastructure.storage import CsvFailureSink
from infrastructure.backends import S3DeletionBackend, CommandDeletionBackend

__all__ = [
    "ConfigLoader",
    "RunConfig",
    "LineReader",
    "CsvFailureSink",
    "S3DeletionBackend",
    "CommandDeletionBackend",
]
