"""
Domain error taxonomy.

Every failure a caller can observe is one of these. The API layer maps
each class to an HTTP status; nothing in core knows about HTTP.
"""


class PTMateError(Exception):
    """Base class for errors reported to the caller."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(PTMateError):
    """Raised when input is malformed or violates a field rule."""
    pass


class UnauthorizedError(PTMateError):
    """Raised when a credential is missing, invalid or expired."""
    pass


class NotFoundError(PTMateError):
    """
    Raised when an entity is absent or not owned by the caller.

    Absence and foreign ownership share this error; callers cannot tell
    another trainer's record from a missing one.
    """
    pass


class ConflictError(PTMateError):
    """Raised when a unique field is already taken."""
    pass


class StorageUnavailableError(PTMateError):
    """Raised when object storage accepted none of the files in a batch."""
    pass
