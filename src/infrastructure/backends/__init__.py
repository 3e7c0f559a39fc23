"""Deletion backends."""

from infrastructure.backends.s3_backend import S3DeletionBackend
from infrastructure.backends.command_backend import CommandDeletionBackend

__all__ = ['S3DeletionBackend', 'CommandDeletionBackend']
