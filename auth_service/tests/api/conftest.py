"""
Fixtures for API tests.

The application is wired with the real user service and repository over the
in-memory identity backend and photo storage, and an HS256 token verifier.
"""

import httpx
import pytest
import pytest_asyncio

from auth_service.app_factory import build_identity_circuit_breaker, create_application
from auth_service.application.services.user_service import UserService
from auth_service.core.resilience import ResilienceManager
from auth_service.tests.mocks.tokens import issue_token, make_token_verifier


@pytest.fixture
def app(test_settings, repository):
    application = create_application(
        settings_override=test_settings,
        token_verifier_override=make_token_verifier(),
        configure_logging=False,
    )
    manager: ResilienceManager = application.state.resilience_manager
    application.state.user_service = UserService(
        repository, build_identity_circuit_breaker(test_settings, manager)
    )
    return application


@pytest_asyncio.fixture
async def client(app):
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


@pytest.fixture
def admin_headers() -> dict[str, str]:
    return {"Authorization": f"Bearer {issue_token(subject='admin-1', username='root', roles=('ADMIN',))}"}


@pytest.fixture
def user_headers() -> dict[str, str]:
    return {"Authorization": f"Bearer {issue_token(subject='user-1', username='alice', roles=('USER',))}"}
