"""Shared utilities package."""

from shared.logging import setup_logger, get_logger
from shared.metrics import MetricsCollector
from shared.types import PathLike

__all__ = [
    "setup_logger",
    "get_logger",
    "MetricsCollector",
    "PathLike",
]
