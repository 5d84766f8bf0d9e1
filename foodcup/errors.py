"""Exceptions raised by the service layer and turned into responses by
``error_handlers``."""


class AppError(Exception):
    """Base application error carrying the HTTP status to answer with."""

    def __init__(self, message, status_code=400):
        super().__init__(message)
        self.status_code = status_code
        self.message = message


class ValidationError(AppError):
    """Tournament input was rejected; nothing was stored."""

    def __init__(self, message="Invalid input."):
        super().__init__(message, 400)


class NotFoundError(AppError):
    """No tournament (or other record) has the requested id."""

    def __init__(self, message="Not found."):
        super().__init__(message, 404)


class AuthenticationError(AppError):
    """The identity provider rejected a sign-in."""

    def __init__(self, message="Sign-in failed."):
        super().__init__(message, 401)
