"""Exception classes for local and traversal failures."""

from typing import Optional


class RepodiffError(Exception):
    """Base exception for repodiff errors."""

    def __init__(self, message: str, details: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def __str__(self):
        if self.details:
            return f"{self.message}: {self.details}"
        return self.message


class ConfigurationError(RepodiffError):
    """Exception raised when configuration or credentials cannot be loaded."""

    pass


class LocalObjectError(RepodiffError):
    """Exception raised when a blob cannot be resolved from the local git store."""

    pass


class LocalIOError(RepodiffError):
    """Exception raised when reading or writing the local tree fails."""

    pass


class TraversalError(RepodiffError):
    """Exception raised when a path of the remote tree could not be processed.

    Carries the path and the underlying cause, which is also chained as
    ``__cause__``.
    """

    def __init__(self, message: str, path: str, cause: BaseException):
        super().__init__(message, details=str(cause))
        self.path = path
        self.cause = cause

    @property
    def root_cause(self) -> BaseException:
        """Innermost non-traversal error."""
        cause = self.cause
        while isinstance(cause, TraversalError):
            cause = cause.cause
        return cause
