"""
User administration endpoints.

Mounted behind the ADMIN role check.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Response, status

from auth_service.application.dtos.user_dtos import Page, UserSummary
from auth_service.core.interfaces.services.user_service_interface import UserUseCaseInterface
from auth_service.presentation.api.schemas.user import UserUpdateRequest
from auth_service.presentation.dependencies.services import get_user_service

router = APIRouter()

UserServiceDep = Annotated[UserUseCaseInterface, Depends(get_user_service)]


@router.get("", response_model=Page[UserSummary], summary="List users")
async def list_users(
    user_service: UserServiceDep,
    page: Annotated[int, Query(description="Zero-based page index")] = 0,
    size: Annotated[int, Query(description="Page size")] = 10,
) -> Page[UserSummary]:
    return await user_service.find_all_users(page, size)


@router.get("/{user_id}", response_model=UserSummary, summary="Get a user")
async def get_user(user_id: str, user_service: UserServiceDep) -> UserSummary:
    return await user_service.find_user_by_id(user_id)


@router.put("/{user_id}", response_model=UserSummary, summary="Update a user")
async def update_user(
    user_id: str, body: UserUpdateRequest, user_service: UserServiceDep
) -> UserSummary:
    updated = await user_service.update_user(user_id, body.to_domain())
    return UserSummary.from_user(updated)


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete a user")
async def delete_user(user_id: str, user_service: UserServiceDep) -> Response:
    await user_service.delete_user(user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
