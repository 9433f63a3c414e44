"""Custom exceptions for the application."""
from typing import Any, Optional


class AppException(Exception):
    """Base application exception."""

    status_code: int = 400

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        super().__init__(self.message)


class AuthenticationError(AppException):
    """Authentication related errors."""

    status_code = 401

    def __init__(self, message: str = "Authentication failed"):
        super().__init__(message, error_code="AUTH_ERROR")


class AccessDeniedError(AppException):
    """The actor may not act on the target resource."""

    status_code = 403

    def __init__(self, message: str = "Permission denied"):
        super().__init__(message, error_code="ACCESS_DENIED")


class NotFoundError(AppException):
    """Resource not found errors."""

    status_code = 404

    def __init__(self, resource: str, resource_id: Any, key: str = "id"):
        super().__init__(
            f"{resource} with {key} {resource_id} not found",
            error_code="NOT_FOUND",
            details={"resource": resource, key: resource_id},
        )


class InvalidArgumentError(AppException):
    """A precondition of the requested operation does not hold."""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(
            message,
            error_code="INVALID_ARGUMENT",
            details={"field": field} if field else {},
        )


class ConflictError(AppException):
    """Concurrent writers kept colliding on the same record."""

    status_code = 409

    def __init__(self, message: str, attempts: Optional[int] = None):
        super().__init__(
            message,
            error_code="CONFLICT",
            details={"attempts": attempts} if attempts else {},
        )
