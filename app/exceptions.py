from typing import Any, Mapping, Optional


class ChefOSError(Exception):
    """Base class for errors raised by the service layer.

    Attributes:
        message: human-readable message
        details: optional mapping with extra context (field errors, validation info)
        code: machine-readable error code rendered in the response envelope
        http_status: suggested HTTP status code for handlers
    """

    http_status = 500
    default_code = "INTERNAL_SERVER_ERROR"

    def __init__(
        self,
        message: str = "Unexpected error",
        details: Optional[Mapping[str, Any]] = None,
        code: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.details = details
        self.code = code or self.default_code

    def to_dict(self) -> dict:
        payload: dict[str, Any] = {"code": self.code, "message": self.message}
        if self.details:
            payload["details"] = dict(self.details)
        return payload

    def __str__(self) -> str:
        return self.message


class ServiceValidationError(ChefOSError):
    """Raised when input data is invalid or a precondition for a service call is not met."""

    http_status = 400
    default_code = "SERVICE_VALIDATION_ERROR"

    def __init__(self, message: str = "Invalid input", details=None, code=None):
        super().__init__(message, details, code)


class UnauthorizedError(ChefOSError):
    """Raised when the caller cannot be identified."""

    http_status = 401
    default_code = "AUTH_REQUIRED"

    def __init__(self, message: str = "Unauthorized", details=None, code=None):
        super().__init__(message, details, code)


class ForbiddenError(ChefOSError):
    """Raised when the caller is known but lacks the required role."""

    http_status = 403
    default_code = "FORBIDDEN"

    def __init__(self, message: str = "Forbidden", details=None, code=None):
        super().__init__(message, details, code)


class NotFoundError(ChefOSError):
    """Raised when a requested resource was not found."""

    http_status = 404
    default_code = "NOT_FOUND"

    def __init__(self, message: str = "Not found", details=None, code=None):
        super().__init__(message, details, code)


class ConflictError(ChefOSError):
    """Raised when a resource conflict occurs (duplicate name, replayed request)."""

    http_status = 409
    default_code = "CONFLICT"

    def __init__(self, message: str = "Conflict", details=None, code=None):
        super().__init__(message, details, code)


class ExternalServiceError(ChefOSError):
    """Raised when an upstream dependency (LLM provider) fails."""

    http_status = 502
    default_code = "AI_UNAVAILABLE"

    def __init__(self, message: str = "Upstream service failed", details=None, code=None):
        super().__init__(message, details, code)
