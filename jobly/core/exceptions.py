"""
Application error types.

Every error carries the HTTP status it maps to; the handler registered in
main.py turns them into ``{"detail": message}`` responses.
"""


class JoblyError(Exception):
    """Base error with an HTTP status code."""

    status_code = 500

    def __init__(self, message: str, status_code: int = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class BadRequestError(JoblyError):
    """Caller supplied no usable input (400)."""
    status_code = 400

    def __init__(self, message: str = "Bad Request"):
        super().__init__(message)


class ConflictError(BadRequestError):
    """Duplicate unique key on create (400)."""


class InvalidReferenceError(BadRequestError):
    """A referenced row does not exist (400)."""


class NotFoundError(JoblyError):
    status_code = 404

    def __init__(self, message: str = "Not Found"):
        super().__init__(message)


class UnauthorizedError(JoblyError):
    status_code = 401

    def __init__(self, message: str = "Unauthorized"):
        super().__init__(message)


class InternalServerError(JoblyError):
    """Calling code broke an internal contract (500)."""
    status_code = 500

    def __init__(self, message: str = "Internal Server Error"):
        super().__init__(message)
