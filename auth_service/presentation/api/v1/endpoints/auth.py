"""
Authentication endpoints.

Public signup and login; both delegate to the user use cases.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, File, Form, Request, Response, UploadFile, status
from pydantic import ValidationError as PydanticValidationError

from auth_service.application.dtos.user_dtos import UserSummary
from auth_service.core.domain.entities.uploaded_file import UploadedFile
from auth_service.core.domain.entities.user import AccessToken
from auth_service.core.exceptions import ValidationError
from auth_service.core.interfaces.services.user_service_interface import UserUseCaseInterface
from auth_service.core.utils.logging import get_logger
from auth_service.core.utils.validation import describe_errors
from auth_service.presentation.api.schemas.user import SignupUserPayload
from auth_service.presentation.dependencies.services import get_user_service

router = APIRouter()
logger = get_logger(__name__)

UserServiceDep = Annotated[UserUseCaseInterface, Depends(get_user_service)]


async def _to_uploaded_file(upload: UploadFile | None) -> UploadedFile | None:
    if upload is None:
        return None
    content = await upload.read()
    if not content:
        return None
    return UploadedFile(content=content, content_type=upload.content_type, filename=upload.filename)


@router.post(
    "/signup",
    status_code=status.HTTP_201_CREATED,
    response_model=UserSummary,
    summary="Register a new user",
)
async def signup(
    request: Request,
    response: Response,
    user_service: UserServiceDep,
    user: Annotated[str, Form(description="User JSON: username, email, password, role")],
    profile_photo: Annotated[UploadFile | None, File(alias="profilePhoto")] = None,
) -> UserSummary:
    """Create a user and optionally store a profile photo."""
    try:
        payload = SignupUserPayload.model_validate_json(user)
    except PydanticValidationError as e:
        raise ValidationError(
            "Invalid user payload", detail=describe_errors(e.errors(include_input=False))
        ) from e

    created = await user_service.create_user(payload.to_domain(), await _to_uploaded_file(profile_photo))

    api_prefix = request.app.state.settings.API_V1_STR
    response.headers["Location"] = f"{api_prefix}/users/{created.id}"
    return UserSummary.from_user(created)


@router.post("/login", response_model=AccessToken, summary="Exchange credentials for a token")
async def login(
    user_service: UserServiceDep,
    username: Annotated[str | None, Form()] = None,
    password: Annotated[str | None, Form()] = None,
) -> AccessToken:
    logger.info(f"Login attempt for {username}")
    return await user_service.authenticate(username, password)
