"""
Bearer token verification against the identity provider's signing keys.
"""

import asyncio
import logging
import time
from collections.abc import Callable
from typing import Any, Protocol

import httpx

from auth_service.core.config.settings import Settings
from auth_service.core.domain.entities.principal import Principal
from auth_service.core.exceptions import AuthenticationError
from auth_service.infrastructure.security.jwt import jose_adapter

logger = logging.getLogger(__name__)


class KeyProvider(Protocol):
    async def get_keys(self) -> Any: ...


class JWKSProvider:
    """Fetches the realm JWKS document and caches it for ``cache_seconds``."""

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        jwks_url: str,
        cache_seconds: float = 300,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._http = http_client
        self._jwks_url = jwks_url
        self._cache_seconds = cache_seconds
        self._clock = clock
        self._keys: dict[str, Any] | None = None
        self._fetched_at = 0.0
        self._lock = asyncio.Lock()

    async def get_keys(self) -> dict[str, Any]:
        async with self._lock:
            if self._keys is None or self._clock() - self._fetched_at >= self._cache_seconds:
                response = await self._http.get(self._jwks_url)
                response.raise_for_status()
                self._keys = response.json()
                self._fetched_at = self._clock()
                logger.debug(f"Fetched {len(self._keys.get('keys', []))} signing keys from {self._jwks_url}")
            return self._keys


class TokenVerifier:
    """Verifies bearer tokens and turns their claims into a Principal."""

    def __init__(
        self,
        key_provider: KeyProvider,
        algorithms: list[str] | None = None,
        audience: str | None = None,
        issuer: str | None = None,
    ):
        self._key_provider = key_provider
        self._algorithms = algorithms or ["RS256"]
        self._audience = audience
        self._issuer = issuer

    @classmethod
    def from_settings(cls, settings: Settings, http_client: httpx.AsyncClient) -> "TokenVerifier":
        return cls(
            key_provider=JWKSProvider(
                http_client, settings.keycloak_jwks_url, cache_seconds=settings.JWKS_CACHE_SECONDS
            ),
            algorithms=settings.JWT_ALGORITHMS,
            audience=settings.JWT_AUDIENCE,
            issuer=settings.JWT_ISSUER,
        )

    async def verify(self, token: str) -> Principal:
        """
        Verify ``token`` and extract the caller.

        Raises:
            AuthenticationError: If the token is expired, malformed or
                not signed by a known key, or the keys cannot be fetched
        """
        try:
            keys = await self._key_provider.get_keys()
        except httpx.HTTPError as e:
            logger.error(f"Unable to fetch token signing keys: {e}")
            raise AuthenticationError("Unable to verify token", detail=str(e)) from e

        try:
            claims = jose_adapter.decode(
                token,
                keys,
                algorithms=self._algorithms,
                audience=self._audience,
                issuer=self._issuer,
            )
        except jose_adapter.ExpiredSignatureError as e:
            raise AuthenticationError("Token has expired") from e
        except jose_adapter.JWTError as e:
            raise AuthenticationError("Invalid token", detail=str(e)) from e

        return Principal.from_claims(claims)
