"""
User Entity Module

This module defines the User entity and related types for the domain layer.
Following clean architecture principles, this module contains only domain entities
without any dependency on infrastructure or application layers.
"""

import enum

from pydantic import BaseModel, ConfigDict, Field


class UserRole(str, enum.Enum):
    """Realm roles a user can hold."""

    ADMIN = "ADMIN"
    USER = "USER"

    @classmethod
    def from_role_names(cls, names: list[str]) -> "UserRole":
        """Return the first known role in ``names``, defaulting to USER."""
        known = {role.value for role in cls}
        for name in names:
            if name in known:
                return cls(name)
        return cls.USER


class User(BaseModel):
    """
    User domain entity.

    Fields are deliberately permissive: required-field checks are business
    rules enforced by the service and repository, not by model parsing, so an
    incomplete user can still reach them and be rejected with a domain error.
    """

    id: str | None = Field(default=None, description="Backend-assigned identifier")
    username: str | None = Field(default=None, description="Username for login")
    email: str | None = Field(default=None, description="User's email address")
    password: str | None = Field(
        default=None,
        exclude=True,
        repr=False,
        description="Write-only credential, never serialized",
    )
    role: UserRole | None = Field(default=None, description="Realm role")
    profile_photo: str = Field(
        default="", alias="profilePhoto", description="URL of the stored profile photo"
    )

    model_config = ConfigDict(populate_by_name=True)


class AccessToken(BaseModel):
    """Opaque bearer credential returned by a successful login."""

    access_token: str = Field(..., alias="accessToken")

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    def __init__(self, access_token: str | None = None, **data):
        if access_token is not None:
            data["access_token"] = access_token
        super().__init__(**data)
