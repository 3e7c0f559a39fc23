"""Presentation layer package."""

from presentation.cli import main, build_parser

__all__ = ["main", "build_parser"]
