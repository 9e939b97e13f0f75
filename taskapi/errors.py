"""Error taxonomy shared by the stores, the service layer and the HTTP layer.

Every error carries a stable, user-facing message and an ``ErrorKind``. The
HTTP layer picks the status code from the kind, never from the message.
"""

from enum import Enum


class ErrorKind(str, Enum):
    """Kinds of failure a request can end with."""

    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    ACCESS_DENIED = "access_denied"
    INVALID_CREDENTIALS = "invalid_credentials"
    INVALID_TOKEN = "invalid_token"


class TaskAPIError(Exception):
    """Base class for all expected request failures."""

    kind: ErrorKind = ErrorKind.VALIDATION
    default_message: str = "request failed"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(TaskAPIError):
    """Malformed input: bad title, status, login fields or identifiers."""

    kind = ErrorKind.VALIDATION
    default_message = "invalid request"


class NotFoundError(TaskAPIError):
    kind = ErrorKind.NOT_FOUND
    default_message = "not found"


class AccessDeniedError(TaskAPIError):
    kind = ErrorKind.ACCESS_DENIED
    default_message = "access denied"


class InvalidCredentialsError(TaskAPIError):
    kind = ErrorKind.INVALID_CREDENTIALS
    default_message = "invalid email or password"


class InvalidTokenError(TaskAPIError):
    kind = ErrorKind.INVALID_TOKEN
    default_message = "Invalid or expired token"


STATUS_CODES: dict[ErrorKind, int] = {
    ErrorKind.VALIDATION: 400,
    ErrorKind.INVALID_CREDENTIALS: 401,
    ErrorKind.INVALID_TOKEN: 401,
    ErrorKind.ACCESS_DENIED: 403,
    ErrorKind.NOT_FOUND: 404,
}


def status_code_for(error: TaskAPIError) -> int:
    """Return the HTTP status code for an error's kind."""
    return STATUS_CODES[error.kind]
