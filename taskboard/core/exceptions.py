"""
Domain exceptions raised by the service layer.

Each carries the HTTP status it maps to; the handlers registered in
``taskboard.main`` turn them into the ``{success, message}`` envelope.
"""


class AppError(Exception):
    """Base application exception."""

    status_code: int = 500

    def __init__(self, message: str, status_code: int = None):
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(message)


class ValidationError(AppError):
    """Bad input or a rejected business rule."""

    status_code = 400


class UnauthorizedError(AppError):
    status_code = 401


class ForbiddenError(AppError):
    status_code = 403


class NotFoundError(AppError):
    status_code = 404


class ConflictError(AppError):
    """Uniqueness violation."""

    status_code = 409
