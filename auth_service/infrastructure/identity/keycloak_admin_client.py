"""
Keycloak admin REST client.

Implements ``IdentityBackendInterface`` over a shared ``httpx.AsyncClient``.
Admin calls are authorized with a token obtained through the password grant
against the admin realm; the token is cached and refreshed shortly before it
expires.
"""

import asyncio
import time
from collections.abc import Awaitable, Callable
from typing import Any

import httpx

from auth_service.core.config.settings import Settings
from auth_service.core.exceptions import BackendError, NotFoundError
from auth_service.core.interfaces.identity_backend_interface import (
    IdentityBackendInterface,
    IdentityRepresentation,
    RoleRepresentation,
)
from auth_service.core.utils.logging import get_logger

logger = get_logger(__name__)

# Refresh the admin token this many seconds before it expires
TOKEN_REFRESH_MARGIN_SECONDS = 30


class KeycloakAdminClient(IdentityBackendInterface):
    """Identity backend adapter for the Keycloak admin and OIDC endpoints."""

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        server_url: str,
        realm: str,
        admin_username: str,
        admin_password: str,
        admin_client_id: str = "admin-cli",
        admin_realm: str = "master",
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ):
        """
        Initialize the client.

        Args:
            http_client: Shared async HTTP client, owned by the caller
            server_url: Base URL of the Keycloak server
            realm: Realm holding the managed users
            admin_username: Admin account used for management calls
            admin_password: Password of the admin account
            admin_client_id: Client used to obtain admin tokens
            admin_realm: Realm the admin account lives in
            clock: Monotonic time source for token expiry
            sleep: Awaitable sleep used between connection attempts
        """
        self._http = http_client
        self._server_url = server_url.rstrip("/")
        self._realm = realm
        self._admin_username = admin_username
        self._admin_password = admin_password
        self._admin_client_id = admin_client_id
        self._admin_realm = admin_realm
        self._clock = clock
        self._sleep = sleep

        self._admin_token: str | None = None
        self._admin_token_expires_at = 0.0
        self._token_lock = asyncio.Lock()

    @classmethod
    def from_settings(cls, settings: Settings, http_client: httpx.AsyncClient) -> "KeycloakAdminClient":
        return cls(
            http_client=http_client,
            server_url=settings.KEYCLOAK_SERVER_URL,
            realm=settings.KEYCLOAK_REALM,
            admin_username=settings.KEYCLOAK_ADMIN_USERNAME,
            admin_password=settings.KEYCLOAK_ADMIN_PASSWORD.get_secret_value(),
            admin_client_id=settings.KEYCLOAK_ADMIN_CLIENT_ID,
            admin_realm=settings.KEYCLOAK_ADMIN_REALM,
        )

    @property
    def _admin_base(self) -> str:
        return f"{self._server_url}/admin/realms/{self._realm}"

    def _token_url(self, realm: str) -> str:
        return f"{self._server_url}/realms/{realm}/protocol/openid-connect/token"

    async def connect(self, attempts: int = 5, delay_seconds: float = 5.0) -> None:
        """
        Obtain the first admin token, retrying while the server is unreachable.

        Raises:
            BackendError: If every attempt fails
        """
        for attempt in range(1, attempts + 1):
            try:
                logger.info(f"Connecting to Keycloak at {self._server_url}")
                async with self._token_lock:
                    await self._refresh_admin_token()
                logger.info("Connected to Keycloak admin API")
                return
            except httpx.HTTPError as e:
                logger.warning(f"Keycloak connection attempt {attempt}/{attempts} failed: {e}")
                if attempt == attempts:
                    raise BackendError(
                        f"Failed to connect to Keycloak after {attempts} attempts",
                        detail=str(e),
                    ) from e
                await self._sleep(delay_seconds)

    async def _refresh_admin_token(self) -> None:
        response = await self._http.post(
            self._token_url(self._admin_realm),
            data={
                "grant_type": "password",
                "client_id": self._admin_client_id,
                "username": self._admin_username,
                "password": self._admin_password,
            },
        )
        response.raise_for_status()
        body = response.json()
        self._admin_token = body["access_token"]
        expires_in = float(body.get("expires_in", 60))
        self._admin_token_expires_at = self._clock() + expires_in - TOKEN_REFRESH_MARGIN_SECONDS

    async def _get_admin_token(self) -> str:
        async with self._token_lock:
            if self._admin_token is None or self._clock() >= self._admin_token_expires_at:
                await self._refresh_admin_token()
            return self._admin_token

    async def _admin_request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        token = await self._get_admin_token()
        response = await self._http.request(
            method,
            f"{self._admin_base}{path}",
            headers={"Authorization": f"Bearer {token}"},
            **kwargs,
        )
        if response.status_code == 401:
            # Token revoked server-side; retry once with a fresh one
            async with self._token_lock:
                self._admin_token = None
            token = await self._get_admin_token()
            response = await self._http.request(
                method,
                f"{self._admin_base}{path}",
                headers={"Authorization": f"Bearer {token}"},
                **kwargs,
            )
        return response

    @staticmethod
    def _check(response: httpx.Response, not_found_message: str = "User not found") -> None:
        if response.status_code == 404:
            raise NotFoundError(not_found_message, detail=str(response.request.url))
        response.raise_for_status()

    async def create_identity(
        self, representation: IdentityRepresentation
    ) -> tuple[int, str | None]:
        response = await self._admin_request("POST", "/users", json=representation)
        return response.status_code, response.headers.get("Location")

    async def get_identity(self, identity_id: str) -> IdentityRepresentation:
        response = await self._admin_request("GET", f"/users/{identity_id}")
        self._check(response)
        return response.json()

    async def list_identities(self, first: int, max_results: int) -> list[IdentityRepresentation]:
        response = await self._admin_request(
            "GET",
            "/users",
            params={"first": first, "max": max_results, "briefRepresentation": "false"},
        )
        self._check(response)
        return response.json()

    async def count_identities(self) -> int:
        response = await self._admin_request("GET", "/users/count")
        self._check(response)
        return int(response.json())

    async def update_identity(
        self, identity_id: str, representation: IdentityRepresentation
    ) -> None:
        response = await self._admin_request("PUT", f"/users/{identity_id}", json=representation)
        self._check(response)

    async def delete_identity(self, identity_id: str) -> None:
        response = await self._admin_request("DELETE", f"/users/{identity_id}")
        self._check(response)

    async def list_effective_realm_roles(self, identity_id: str) -> list[str]:
        response = await self._admin_request(
            "GET", f"/users/{identity_id}/role-mappings/realm/composite"
        )
        self._check(response)
        return [role["name"] for role in response.json()]

    async def list_realm_roles(self, identity_id: str) -> list[RoleRepresentation]:
        response = await self._admin_request("GET", f"/users/{identity_id}/role-mappings/realm")
        self._check(response)
        return response.json()

    async def assign_realm_roles(
        self, identity_id: str, roles: list[RoleRepresentation]
    ) -> None:
        response = await self._admin_request(
            "POST", f"/users/{identity_id}/role-mappings/realm", json=roles
        )
        self._check(response)

    async def remove_realm_roles(
        self, identity_id: str, roles: list[RoleRepresentation]
    ) -> None:
        response = await self._admin_request(
            "DELETE", f"/users/{identity_id}/role-mappings/realm", json=roles
        )
        self._check(response)

    async def get_role_by_name(self, name: str) -> RoleRepresentation:
        response = await self._admin_request("GET", f"/roles/{name}")
        self._check(response, not_found_message=f"Role {name} not found")
        return response.json()

    async def exchange_token(
        self,
        client_id: str,
        client_secret: str,
        username: str,
        password: str,
        scope: str,
    ) -> tuple[int, dict[str, Any] | None]:
        response = await self._http.post(
            self._token_url(self._realm),
            data={
                "grant_type": "password",
                "client_id": client_id,
                "client_secret": client_secret,
                "username": username,
                "password": password,
                "scope": scope,
            },
        )
        try:
            body = response.json()
        except ValueError:
            body = None
        return response.status_code, body
