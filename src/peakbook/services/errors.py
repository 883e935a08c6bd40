"""Exception hierarchy shared by stores, services and API handlers."""


class ServiceError(Exception):
    """Base exception for errors that map onto an API response."""

    status_code: int = 500
    default_message: str = "An internal server error occurred"

    def __init__(self, message: str | None = None, status_code: int | None = None) -> None:
        super().__init__(message or self.default_message)
        if status_code is not None:
            self.status_code = status_code

    @property
    def message(self) -> str:
        return str(self)


class ValidationError(ServiceError):
    """Raised when a required field is missing or malformed."""

    status_code = 400
    default_message = "Invalid request"


class UnauthenticatedError(ServiceError):
    """Raised when the caller cannot be identified."""

    status_code = 401
    default_message = "Not authorized"


class InvalidTokenError(UnauthenticatedError):
    """Raised when a bearer token is missing, malformed, badly signed or expired."""

    default_message = "Not authorized, token failed"


class UserNotFoundError(UnauthenticatedError):
    """Raised when a valid token names a user that no longer exists."""

    default_message = "Not authorized, user not found"


class ForbiddenError(ServiceError):
    """Raised when the caller is authenticated but not allowed to act."""

    status_code = 403
    default_message = "Not authorized to perform this action"


class NotFoundError(ServiceError):
    """Raised when a resource is not found."""

    status_code = 404
    default_message = "Resource not found"


class ConflictError(ServiceError):
    """Raised when a write would duplicate an existing entry."""

    status_code = 409
    default_message = "Resource already exists"


class DuplicateUsernameError(ConflictError):
    """Raised when signing up with a username that is already taken."""

    default_message = "Username already exists"


class InternalError(ServiceError):
    """Raised for unexpected storage or parse failures."""

    status_code = 500
