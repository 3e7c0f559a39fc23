"""Factory for creating deletion backends."""

from domain.protocols import IDeletionBackend
from domain.exceptions import ConfigurationError
from infrastructure.config import RunConfig
from infrastructure.backends import S3DeletionBackend, CommandDeletionBackend
from shared.logging import get_logger

logger = get_logger(__name__)


class BackendFactory:
    """
    Creates the deletion backend selected by the run configuration.

    ``api`` talks to the store through boto3; ``command`` runs the ``aws``
    command line tool once per request and needs it on PATH.
    """

    def __init__(self):
        self._logger = get_logger(__name__)

    def create(self, config: RunConfig) -> IDeletionBackend:
        """
        Create backend for config.

        Raises:
            ConfigurationError: If the backend name is unknown
            BackendNotAvailableError: If the command line tool is missing
        """
        if config.backend == "api":
            self._logger.info(f"Using S3 API backend: {config.endpoint}")
            return S3DeletionBackend(
                endpoint=config.endpoint,
                region=config.region,
                verify_ssl=config.verify_ssl,
                max_pool_connections=max(10, config.workers)
            )

        if config.backend == "command":
            backend = CommandDeletionBackend(
                endpoint=config.endpoint,
                timeout=config.command_timeout,
                verify_ssl=config.verify_ssl
            )
            backend.ensure_available()
            self._logger.info(f"Using aws command line backend: {config.endpoint}")
            return backend

        raise ConfigurationError(f"Invalid backend: {config.backend}")
