class ErrorResponse(Exception):
    """Base error carrying an HTTP status code.

    Raised anywhere below the route layer; the handler registered in
    `main.py` turns it into `{"success": False, "error": message}`.
    """
    status_code: int = 500

    def __init__(self, message: str, status_code: int | None = None):
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(message)


class ValidationError(ErrorResponse):
    status_code = 400


class AuthenticationError(ErrorResponse):
    status_code = 401


class InvalidOrExpiredToken(AuthenticationError):
    status_code = 400

    def __init__(self, message: str = "Invalid token"):
        super().__init__(message)


class NotFoundError(ErrorResponse):
    status_code = 404


class DependencyError(ErrorResponse):
    status_code = 500


class PersistenceError(ErrorResponse):
    status_code = 500


__all__ = [
    "ErrorResponse",
    "ValidationError",
    "AuthenticationError",
    "InvalidOrExpiredToken",
    "NotFoundError",
    "DependencyError",
    "PersistenceError",
]
