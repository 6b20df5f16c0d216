"""
Keycloak user repository.

Translates user operations into identity backend calls. Domain errors
(validation, not found, authentication, file storage) propagate unchanged;
any other failure is logged and surfaced as ``BackendError`` with the
original message kept in ``detail``.
"""

from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from auth_service.core.domain.entities.uploaded_file import UploadedFile
from auth_service.core.domain.entities.user import AccessToken, User, UserRole
from auth_service.core.exceptions import (
    AuthenticationError,
    AuthServiceError,
    BackendError,
    NotFoundError,
)
from auth_service.core.interfaces.file_storage_interface import FileStorageInterface
from auth_service.core.interfaces.identity_backend_interface import (
    IdentityBackendInterface,
    IdentityRepresentation,
    RoleRepresentation,
)
from auth_service.core.utils.logging import get_logger
from auth_service.core.utils.validation import (
    is_blank,
    is_trusted_photo_url,
    validate_credentials,
    validate_id,
    validate_user_for_creation,
    validate_user_for_update,
)
from auth_service.infrastructure.repositories.base_user_repository import (
    AbstractUserRepository,
)

logger = get_logger(__name__)

PROFILE_PHOTO_ATTRIBUTE = "profilePhoto"
HTTP_CREATED = 201
HTTP_OK = 200


def profile_photo_of(representation: IdentityRepresentation) -> str:
    """First value of the profile photo attribute, or an empty string."""
    attributes = representation.get("attributes") or {}
    photos = attributes.get(PROFILE_PHOTO_ATTRIBUTE) or []
    return photos[0] if photos else ""


class KeycloakUserRepository(AbstractUserRepository):
    """User repository backed by Keycloak."""

    def __init__(
        self,
        identity_backend: IdentityBackendInterface,
        storage: FileStorageInterface,
        client_id: str,
        client_secret: str,
        token_scope: str = "profile email roles openid",
        photo_key_prefix: str = "profile-photos",
        photo_upload_required: bool = False,
    ):
        super().__init__(
            storage,
            photo_key_prefix=photo_key_prefix,
            photo_upload_required=photo_upload_required,
        )
        self._backend = identity_backend
        self._client_id = client_id
        self._client_secret = client_secret
        self._token_scope = token_scope

    @contextmanager
    def _translate_errors(self, operation: str) -> Iterator[None]:
        try:
            yield
        except AuthServiceError:
            raise
        except Exception as e:
            logger.error(f"{operation} failed: {e}", exc_info=True)
            raise BackendError(detail=str(e)) from e

    async def create(self, user: User, profile_photo: UploadedFile | None) -> User:
        validate_user_for_creation(user)
        with self._translate_errors("create"):
            photo_url = await self.upload_profile_photo(user.username, profile_photo)
            representation = self._to_representation(user, photo_url)

            logger.info(f"Creating user {user.username} with realm roles {representation['realmRoles']}")
            status, location = await self._backend.create_identity(representation)
            if status != HTTP_CREATED or not location:
                raise BackendError(
                    "Identity backend rejected user creation", detail=f"status={status}"
                )
            user_id = location.rstrip("/").rsplit("/", 1)[-1]
            logger.info(f"User created with id {user_id}")

            role = await self._lookup_role(user.role)
            await self._backend.assign_realm_roles(user_id, [role])

            return User(
                id=user_id,
                username=user.username,
                email=user.email,
                password=user.password,
                role=user.role,
                profile_photo=photo_url,
            )

    async def authenticate(self, username: str, password: str) -> AccessToken:
        validate_credentials(username, password)
        with self._translate_errors("authenticate"):
            logger.info(f"Requesting token with scope: {self._token_scope}")
            status, body = await self._backend.exchange_token(
                self._client_id, self._client_secret, username, password, self._token_scope
            )
            if status == HTTP_OK and body and body.get("access_token"):
                return AccessToken(access_token=body["access_token"])
            raise AuthenticationError(detail=f"status={status}")

    async def find_by_id(self, user_id: str) -> User:
        user_id = validate_id(user_id)
        with self._translate_errors("find_by_id"):
            try:
                representation = await self._backend.get_identity(user_id)
            except NotFoundError:
                logger.warning(f"User {user_id} does not exist in the identity backend")
                raise
            return await self._to_user(representation)

    async def find_all(self, first: int, max_results: int) -> list[User]:
        with self._translate_errors("find_all"):
            representations = await self._backend.list_identities(first, max_results)
            # One role lookup per identity
            return [await self._to_user(rep) for rep in representations]

    async def count(self) -> int:
        with self._translate_errors("count"):
            return int(await self._backend.count_identities())

    async def update(self, user_id: str, user: User) -> User:
        user_id = validate_id(user_id)
        validate_user_for_update(user)
        with self._translate_errors("update"):
            representation = await self._backend.get_identity(user_id)
            representation["username"] = user.username
            representation["email"] = user.email
            representation["realmRoles"] = [user.role.value]

            stored_photo = profile_photo_of(representation)
            if is_trusted_photo_url(user.profile_photo):
                attributes = dict(representation.get("attributes") or {})
                attributes[PROFILE_PHOTO_ATTRIBUTE] = [user.profile_photo]
                representation["attributes"] = attributes
                stored_photo = user.profile_photo
            elif not is_blank(user.profile_photo):
                logger.warning(f"Ignoring untrusted profile photo URL for user {user_id}")

            await self._backend.update_identity(user_id, representation)
            await self._reassign_role(user_id, user.role)

            return User(
                id=user_id,
                username=user.username,
                email=user.email,
                role=user.role,
                profile_photo=stored_photo,
            )

    async def delete(self, user_id: str) -> None:
        user_id = validate_id(user_id)
        with self._translate_errors("delete"):
            await self._backend.delete_identity(user_id)

    async def _reassign_role(self, user_id: str, role: UserRole) -> None:
        """Leave ``role`` as the only directly assigned realm role."""
        assigned = await self._backend.list_realm_roles(user_id)
        to_remove = [r for r in assigned if r.get("name") != role.value]
        already_assigned = len(to_remove) < len(assigned)

        if to_remove:
            await self._backend.remove_realm_roles(user_id, to_remove)
        if not already_assigned:
            target = await self._lookup_role(role)
            await self._backend.assign_realm_roles(user_id, [target])

    async def _lookup_role(self, role: UserRole) -> RoleRepresentation:
        try:
            return await self._backend.get_role_by_name(role.value)
        except NotFoundError as e:
            # A missing realm role is a backend misconfiguration, not a missing user
            raise BackendError(f"Realm role {role.value} is not defined", detail=str(e)) from e

    async def _to_user(self, representation: IdentityRepresentation) -> User:
        role_names = await self._backend.list_effective_realm_roles(representation["id"])
        return User(
            id=representation["id"],
            username=representation.get("username"),
            email=representation.get("email"),
            role=UserRole.from_role_names(role_names),
            profile_photo=profile_photo_of(representation),
        )

    @staticmethod
    def _to_representation(user: User, photo_url: str) -> dict[str, Any]:
        return {
            "username": user.username,
            "email": user.email,
            "enabled": True,
            "credentials": [
                {"type": "password", "value": user.password, "temporary": False}
            ],
            "realmRoles": [user.role.value],
            "attributes": {PROFILE_PHOTO_ATTRIBUTE: [photo_url]},
        }
