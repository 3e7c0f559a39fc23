"""Configuration package."""

from infrastructure.config.loader import ConfigLoader, RunConfig

__all__ = ["ConfigLoader", "RunConfig"]
