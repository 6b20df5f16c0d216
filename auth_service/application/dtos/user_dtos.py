"""
User Data Transfer Objects (DTOs) module.

Read-side projections returned by the user use cases: a password-free user
summary and a generic page envelope.
"""

from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field, computed_field

from auth_service.core.domain.entities.user import User, UserRole

T = TypeVar("T")


class UserSummary(BaseModel):
    """DTO exposing a user without credentials."""

    id: str | None = None
    username: str | None = None
    email: str | None = None
    role: UserRole | None = None
    profile_photo: str = Field(default="", alias="profilePhoto")

    model_config = ConfigDict(populate_by_name=True)

    @classmethod
    def from_user(cls, user: User) -> "UserSummary":
        return cls(
            id=user.id,
            username=user.username,
            email=user.email,
            role=user.role,
            profile_photo=user.profile_photo or "",
        )


class Page(BaseModel, Generic[T]):
    """
    One page of a paginated result.

    ``total_pages`` is derived from ``total_elements`` and ``size`` on every
    access and is never stored.
    """

    content: list[T] = Field(default_factory=list)
    page: int = Field(..., ge=0)
    size: int = Field(..., gt=0)
    total_elements: int = Field(..., ge=0, alias="totalElements")

    model_config = ConfigDict(populate_by_name=True)

    @computed_field(alias="totalPages")
    @property
    def total_pages(self) -> int:
        return (self.total_elements + self.size - 1) // self.size
