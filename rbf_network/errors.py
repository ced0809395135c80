"""
Exceptions raised by rbf_network.
"""


class RBFNetworkError(Exception):
    """Base class for all rbf_network errors."""


class DimensionMismatchError(RBFNetworkError, ValueError):
    """Raised when two points, or a query point and a model, differ in dimension."""


class FileAccessError(RBFNetworkError, OSError):
    """Raised when a persisted model file cannot be opened for reading."""

    def __init__(self, path: str, reason: str | None = None):
        message = f'Unable to open file "{path}" for deserializing.'
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)
        self.path = path
