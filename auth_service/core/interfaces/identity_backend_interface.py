"""
Identity backend interface definition.

This module defines the narrow contract the user repository consumes from the
external identity provider: user CRUD, realm role mappings, and the password
grant token exchange. Representations are plain dictionaries in the
provider's own wire shape.
"""

from abc import ABC, abstractmethod
from typing import Any

IdentityRepresentation = dict[str, Any]
RoleRepresentation = dict[str, Any]


class IdentityBackendInterface(ABC):
    """Interface for the external identity provider."""

    @abstractmethod
    async def create_identity(
        self, representation: IdentityRepresentation
    ) -> tuple[int, str | None]:
        """
        Submit a new identity.

        Returns:
            The HTTP status and the Location header of the created resource
        """
        pass

    @abstractmethod
    async def get_identity(self, identity_id: str) -> IdentityRepresentation:
        """
        Fetch one identity.

        Raises:
            NotFoundError: If the backend has no such identity
        """
        pass

    @abstractmethod
    async def list_identities(self, first: int, max_results: int) -> list[IdentityRepresentation]:
        """List identities starting at zero-based offset ``first``."""
        pass

    @abstractmethod
    async def count_identities(self) -> int:
        """Total number of identities in the managed population."""
        pass

    @abstractmethod
    async def update_identity(
        self, identity_id: str, representation: IdentityRepresentation
    ) -> None:
        """Replace an identity's representation."""
        pass

    @abstractmethod
    async def delete_identity(self, identity_id: str) -> None:
        """
        Remove an identity.

        Raises:
            NotFoundError: If the backend has no such identity
        """
        pass

    @abstractmethod
    async def list_effective_realm_roles(self, identity_id: str) -> list[str]:
        """Names of the realm roles in effect for an identity, composites included."""
        pass

    @abstractmethod
    async def list_realm_roles(self, identity_id: str) -> list[RoleRepresentation]:
        """Realm roles directly assigned to an identity."""
        pass

    @abstractmethod
    async def assign_realm_roles(
        self, identity_id: str, roles: list[RoleRepresentation]
    ) -> None:
        pass

    @abstractmethod
    async def remove_realm_roles(
        self, identity_id: str, roles: list[RoleRepresentation]
    ) -> None:
        pass

    @abstractmethod
    async def get_role_by_name(self, name: str) -> RoleRepresentation:
        pass

    @abstractmethod
    async def exchange_token(
        self,
        client_id: str,
        client_secret: str,
        username: str,
        password: str,
        scope: str,
    ) -> tuple[int, dict[str, Any] | None]:
        """
        Exchange user credentials for tokens with the password grant.

        Returns:
            The HTTP status and the decoded JSON body, if any
        """
        pass
