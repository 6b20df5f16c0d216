"""
Request schemas for the user endpoints.

Fields are optional on purpose: required-field rules are enforced by the use
case layer so that every missing field yields the same error envelope.
"""

from pydantic import BaseModel, ConfigDict, Field

from auth_service.core.domain.entities.user import User, UserRole


class SignupUserPayload(BaseModel):
    """JSON document sent in the ``user`` part of the signup form."""

    username: str | None = None
    email: str | None = None
    password: str | None = None
    role: UserRole | None = None

    model_config = ConfigDict(extra="ignore")

    def to_domain(self) -> User:
        return User(
            username=self.username,
            email=self.email,
            password=self.password,
            role=self.role,
        )


class UserUpdateRequest(BaseModel):
    """Body of ``PUT /users/{id}``."""

    username: str | None = None
    email: str | None = None
    role: UserRole | None = None
    profile_photo: str | None = Field(default=None, alias="profilePhoto")

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    def to_domain(self) -> User:
        return User(
            username=self.username,
            email=self.email,
            role=self.role,
            profile_photo=self.profile_photo or "",
        )
