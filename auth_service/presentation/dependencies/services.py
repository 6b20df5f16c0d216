"""
Service dependencies.

Collaborators are built once per application and kept on ``app.state``;
these providers hand them to endpoints and can be overridden in tests.
"""

from fastapi import Request

from auth_service.core.interfaces.services.user_service_interface import UserUseCaseInterface
from auth_service.core.resilience import ResilienceManager


def get_user_service(request: Request) -> UserUseCaseInterface:
    service = getattr(request.app.state, "user_service", None)
    if service is None:
        raise RuntimeError("User service has not been initialized")
    return service


def get_resilience_manager(request: Request) -> ResilienceManager:
    return request.app.state.resilience_manager
