"""
Typed errors raised by the grading, policy, validation and service layers.

Each error knows the HTTP status a REST route should answer with and the
extension code a GraphQL layer would attach, so transports never have to
inspect messages to decide how to render a failure.
"""


class ServiceError(Exception):
    """Base class for every error the core raises on purpose."""

    status_code: int = 500
    code: str = "INTERNAL_SERVER_ERROR"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {"success": False, "message": self.message, "code": self.code}


class ValidationError(ServiceError):
    """Missing or malformed input, or a uniqueness violation."""

    status_code = 400
    code = "BAD_USER_INPUT"


class InvalidInputError(ValidationError):
    """Numeric input the grade engine cannot work with."""


class NotFoundError(ServiceError):
    status_code = 404
    code = "NOT_FOUND"


class AuthenticationError(ServiceError):
    status_code = 401
    code = "UNAUTHENTICATED"


class ForbiddenError(ServiceError):
    status_code = 403
    code = "FORBIDDEN"


class StorageError(ServiceError):
    """The backing store failed. Never retried here."""

    status_code = 500
    code = "INTERNAL_SERVER_ERROR"
