"""
Input validation helpers.

Shared by the use case layer and the repository so both reject bad input
before any external call is made.
"""

from typing import Any
from uuid import UUID

from auth_service.core.domain.entities.user import User
from auth_service.core.exceptions import ValidationError

TRUSTED_PHOTO_URL_MARKERS = ("https", "s3")


def is_blank(value: str | None) -> bool:
    """Return True for None, empty, or whitespace-only strings."""
    return value is None or not str(value).strip()


def require_text(value: str | None, field_name: str) -> None:
    if is_blank(value):
        raise ValidationError(f"{field_name} is required")


def require_present(value: Any, field_name: str) -> None:
    if value is None:
        raise ValidationError(f"{field_name} is required")


def validate_id(user_id: str | UUID | None) -> str:
    """
    Check that a user id was supplied and normalise it to a string.

    Raises:
        ValidationError: If the id is missing or blank
    """
    if user_id is None or is_blank(str(user_id)):
        raise ValidationError("User ID must not be null")
    return str(user_id)


def validate_user_for_creation(user: User | None) -> None:
    if user is None:
        raise ValidationError("User must not be null")
    require_text(user.username, "Username")
    require_text(user.email, "Email")
    require_text(user.password, "Password")
    require_present(user.role, "Role")


def validate_user_for_update(user: User | None) -> None:
    if user is None:
        raise ValidationError("User must not be null")
    require_text(user.username, "Username")
    require_text(user.email, "Email")
    require_present(user.role, "Role")


def validate_credentials(username: str | None, password: str | None) -> None:
    require_text(username, "Username")
    require_text(password, "Password")


def validate_pagination(page: int, size: int) -> None:
    if page < 0 or size <= 0:
        raise ValidationError(
            "Invalid pagination parameters", detail={"page": page, "size": size}
        )


def is_trusted_photo_url(url: str | None) -> bool:
    """A photo URL is accepted only if it points at the object store over TLS."""
    if is_blank(url):
        return False
    return all(marker in url for marker in TRUSTED_PHOTO_URL_MARKERS)


def describe_errors(errors: list[dict[str, Any]]) -> list[str]:
    """
    Render pydantic error entries as ``loc: msg`` lines.

    Only location and message are kept; the submitted input never appears,
    so the result is safe to log.
    """
    return [f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}" for error in errors]
