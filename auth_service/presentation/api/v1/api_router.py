"""
Main API router for version 1.

Aggregates all endpoint routers for this version.
"""

from fastapi import APIRouter, Depends

from auth_service.presentation.api.v1.endpoints.auth import router as auth_router
from auth_service.presentation.api.v1.endpoints.users import router as users_router
from auth_service.presentation.dependencies.auth import require_admin

api_v1_router = APIRouter()

api_v1_router.include_router(auth_router, prefix="/auth", tags=["Authentication"])
api_v1_router.include_router(
    users_router,
    prefix="/users",
    tags=["Users"],
    dependencies=[Depends(require_admin)],
)
