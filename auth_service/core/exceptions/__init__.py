"""
Core exceptions package.

This package contains all exceptions used throughout the application.
"""

from auth_service.core.exceptions.base_exceptions import (
    AuthenticationError,
    AuthServiceError,
    BackendError,
    ConfigurationError,
    FileStorageError,
    NotFoundError,
    ServiceUnavailableError,
    ValidationError,
)

__all__ = [
    "AuthServiceError",
    "AuthenticationError",
    "BackendError",
    "ConfigurationError",
    "FileStorageError",
    "NotFoundError",
    "ServiceUnavailableError",
    "ValidationError",
]
