"""Exceptions raised by package manager backends."""


class BackendError(Exception):
    """Base exception for backend errors."""


class CommandSpawnError(BackendError):
    """Raised when the backend binary is missing or cannot be started."""


class OutputParseError(BackendError):
    """Raised when backend output is not valid text or has an unexpected shape."""


class QueryFailedError(BackendError):
    """Raised when a query command exits with a non-zero status."""


class UnsupportedOperationError(BackendError):
    """Raised when an operation is invoked on a backend that cannot perform it."""
