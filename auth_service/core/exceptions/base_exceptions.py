"""
Base exceptions for the auth service.

Every error that crosses a layer boundary derives from ``AuthServiceError``.
The ``message`` is safe to show to API clients; ``detail`` carries
diagnostic information that is logged but never returned.
"""

from typing import Any

ErrorDetail = str | list[str] | dict[str, Any] | None


class AuthServiceError(Exception):
    """
    Base exception for all auth service errors.

    Subclasses set ``default_message`` and ``default_code``; both can be
    overridden per instance.

    Attributes:
        message: A human-readable error message
        detail: Additional information about the error
        code: An error code for machine processing
    """

    default_message = "Auth service error"
    default_code: str | None = None

    def __init__(
        self,
        message: str | None = None,
        detail: ErrorDetail = None,
        code: str | None = None,
    ) -> None:
        self.message = message or self.default_message
        self.detail = detail
        self.code = code or self.default_code
        super().__init__(self.message)

    def __str__(self) -> str:
        if self.detail:
            return f"{self.message} - {self.detail}"
        return self.message


class ValidationError(AuthServiceError):
    """Raised when a required field is missing or blank."""

    default_message = "Validation error"
    default_code = "VALIDATION_ERROR"


class NotFoundError(AuthServiceError):
    """Raised when the identity backend has no such user."""

    default_message = "User not found"
    default_code = "NOT_FOUND"


class AuthenticationError(AuthServiceError):
    """Raised when the credential exchange does not produce a token."""

    default_message = "Invalid credentials"
    default_code = "AUTHENTICATION_ERROR"


class BackendError(AuthServiceError):
    """
    Raised for unexpected failures while talking to the identity backend.

    The original exception text goes into ``detail``; ``message`` stays generic.
    """

    default_message = "Identity backend request failed"
    default_code = "BACKEND_ERROR"


class ServiceUnavailableError(AuthServiceError):
    """Raised by the circuit breaker fallback while the breaker is open."""

    default_message = "Service unavailable, please try again later"
    default_code = "SERVICE_UNAVAILABLE"


class FileStorageError(AuthServiceError):
    """Raised when a profile photo cannot be written to the object store."""

    default_message = "Failed to upload profile photo"
    default_code = "FILE_STORAGE_ERROR"


class ConfigurationError(AuthServiceError):
    """Raised for unsupported or missing configuration."""

    default_message = "Configuration error"
    default_code = "CONFIGURATION_ERROR"
