"""Custom exception classes for the application."""

from .core.types import CONFLICT, FORBIDDEN, NOT_FOUND, STORE, VALIDATION


class AppError(Exception):
    """Base application error class."""

    def __init__(self, message, status_code=400):
        """Initialize the error."""
        super().__init__(message)
        self.status_code = status_code
        self.message = message


class ValidationError(AppError):
    """Raised when user input fails validation."""

    def __init__(self, message="Validation failed."):
        """Initialize the error."""
        super().__init__(message, 400)


class DuplicateResourceError(AppError):
    """Raised when a resource already exists or a user is already enrolled."""

    def __init__(self, message="Resource already exists."):
        """Initialize the error."""
        super().__init__(message, 409)


class NotFoundError(AppError):
    """Raised when a resource is not found."""

    def __init__(self, message="Resource not found."):
        """Initialize the error."""
        super().__init__(message, 404)


class PermissionDeniedError(AppError):
    """Raised when a user may not act on a resource."""

    def __init__(self, message="You do not have permission to do that."):
        """Initialize the error."""
        super().__init__(message, 403)


class StoreError(AppError):
    """Raised when Firestore or Storage fails."""

    def __init__(self, message="An error occurred!"):
        """Initialize the error."""
        super().__init__(message, 500)


_ERRORS_BY_KIND = {
    VALIDATION: ValidationError,
    NOT_FOUND: NotFoundError,
    CONFLICT: DuplicateResourceError,
    FORBIDDEN: PermissionDeniedError,
    STORE: StoreError,
}


def raise_for_failure(result):
    """Raise the matching AppError if a service result is a failure."""
    if not result.ok:
        raise _ERRORS_BY_KIND.get(result.kind, AppError)(result.message)
    return result
