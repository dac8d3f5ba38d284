"""Custom exception classes for the application.

Each error maps onto one status of the callable wire protocol and is rendered
by :mod:`teamboard.error_handlers`.
"""


class CallableError(Exception):
    """Base application error class."""

    status = "INTERNAL"
    status_code = 500

    def __init__(self, message="An internal error occurred."):
        """Initialize the error."""
        super().__init__(message)
        self.message = message

    def to_dict(self):
        """Return the error envelope body."""
        return {"status": self.status, "message": self.message}


class UnauthenticatedError(CallableError):
    """Raised when the caller did not present a valid ID token."""

    status = "UNAUTHENTICATED"
    status_code = 401

    def __init__(self, message="You must be logged in."):
        """Initialize the error."""
        super().__init__(message)


class InvalidArgumentError(CallableError):
    """Raised when the request payload fails validation."""

    status = "INVALID_ARGUMENT"
    status_code = 400

    def __init__(self, message="Invalid request."):
        """Initialize the error."""
        super().__init__(message)


class PermissionDeniedError(CallableError):
    """Raised when the caller is not allowed to perform the operation."""

    status = "PERMISSION_DENIED"
    status_code = 403

    def __init__(self, message="Permission denied."):
        """Initialize the error."""
        super().__init__(message)


class NotFoundError(CallableError):
    """Raised when a resource is not found."""

    status = "NOT_FOUND"
    status_code = 404

    def __init__(self, message="Resource not found."):
        """Initialize the error."""
        super().__init__(message)


class AlreadyExistsError(CallableError):
    """Raised when trying to create a resource that already exists."""

    status = "ALREADY_EXISTS"
    status_code = 409

    def __init__(self, message="Resource already exists."):
        """Initialize the error."""
        super().__init__(message)


class InternalError(CallableError):
    """Raised for failures the caller cannot act on."""
