"""Authenticated caller derived from a verified bearer token."""

from dataclasses import dataclass, field
from typing import Any

ROLE_PREFIX = "ROLE_"


@dataclass(frozen=True)
class Principal:
    """Identity and realm roles carried by an access token."""

    subject: str
    username: str | None = None
    roles: frozenset[str] = field(default_factory=frozenset)

    @property
    def authorities(self) -> frozenset[str]:
        """Roles as ``ROLE_``-prefixed authorities."""
        return frozenset(f"{ROLE_PREFIX}{role}" for role in self.roles)

    def has_role(self, role: str) -> bool:
        return f"{ROLE_PREFIX}{role}" in self.authorities

    @classmethod
    def from_claims(cls, claims: dict[str, Any]) -> "Principal":
        """Build a principal from decoded token claims (``realm_access.roles``)."""
        realm_access = claims.get("realm_access") or {}
        roles = realm_access.get("roles") or []
        return cls(
            subject=str(claims.get("sub", "")),
            username=claims.get("preferred_username"),
            roles=frozenset(str(role) for role in roles),
        )
