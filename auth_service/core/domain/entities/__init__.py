"""Domain entities."""

from auth_service.core.domain.entities.principal import Principal
from auth_service.core.domain.entities.uploaded_file import UploadedFile
from auth_service.core.domain.entities.user import AccessToken, User, UserRole

__all__ = ["AccessToken", "Principal", "UploadedFile", "User", "UserRole"]
