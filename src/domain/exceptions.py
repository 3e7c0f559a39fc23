"""Domain exceptions for the bulk deletion pipeline."""


class DomainException(Exception):
    """Base exception for all domain errors."""
    pass


class ConfigurationError(DomainException):
    """Raised when configuration is invalid."""
    pass


class InputFileError(DomainException):
    """Raised when the input file cannot be read."""
    pass


class FailureSinkError(DomainException):
    """Raised when the failure file cannot be created or written."""
    pass


class BackendNotAvailableError(DomainException):
    """Raised when requested deletion backend is not available."""
    pass
