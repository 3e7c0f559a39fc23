"""Input/output helpers."""

from infrastructure.io.reader import LineReader

__all__ = ["LineReader"]
