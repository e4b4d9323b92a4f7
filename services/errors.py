class ApiError(Exception):
    """Base class for errors that map to a structured JSON response."""

    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message=None, errors=None, status_code=None):
        super().__init__(message or self.default_message)
        self.message = message or self.default_message
        self.errors = errors
        if status_code is not None:
            self.status_code = status_code

    def to_dict(self):
        body = {"success": False, "message": self.message}
        if self.errors:
            body["errors"] = self.errors
        return body


class ValidationError(ApiError):
    status_code = 400
    default_message = "Validation error"


class Unauthenticated(ApiError):
    status_code = 401
    default_message = "Access token is required"


class InvalidToken(Unauthenticated):
    default_message = "Invalid or expired token"


class UnknownSubject(Unauthenticated):
    default_message = "User not found"


class NotFound(ApiError):
    # Also used for resources the caller does not own
    status_code = 404
    default_message = "Resource not found"


class Conflict(ApiError):
    status_code = 409
    default_message = "Resource already exists"
