"""Unit tests for the authentication, request id and logging middleware."""

import json
import logging
import uuid

import httpx
import pytest
import pytest_asyncio
from fastapi import Depends, FastAPI, Request

from auth_service.core.domain.entities.principal import Principal
from auth_service.core.utils.logging import NO_REQUEST_ID, request_id_context
from auth_service.presentation.dependencies.auth import require_admin
from auth_service.presentation.exception_handlers import register_exception_handlers
from auth_service.presentation.middleware.authentication import AuthenticationMiddleware
from auth_service.presentation.middleware.logging import LoggingMiddleware
from auth_service.presentation.middleware.request_id import REQUEST_ID_HEADER, RequestIdMiddleware
from auth_service.tests.mocks.tokens import issue_token, make_token_verifier


def build_app() -> FastAPI:
    app = FastAPI()
    register_exception_handlers(app)
    app.state.token_verifier = make_token_verifier()
    app.add_middleware(AuthenticationMiddleware, public_paths={"/open/", "/context"})
    app.add_middleware(LoggingMiddleware, logger=logging.getLogger("auth_service.tests.access"))
    app.add_middleware(RequestIdMiddleware)

    @app.get("/open")
    async def open_endpoint():
        return {"ok": True}

    @app.get("/context")
    async def context():
        return {"request_id": request_id_context.get()}

    @app.get("/me")
    async def me(request: Request):
        principal: Principal = request.state.principal
        return {"subject": principal.subject, "roles": sorted(principal.authorities)}

    @app.get("/admin", dependencies=[Depends(require_admin)])
    async def admin_only():
        return {"ok": True}

    return app


@pytest_asyncio.fixture
async def client():
    transport = httpx.ASGITransport(app=build_app())
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


def bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


class TestAuthenticationMiddleware:
    @pytest.mark.asyncio
    async def test_public_path_needs_no_token(self, client):
        response = await client.get("/open")

        assert response.status_code == 200

    @pytest.mark.asyncio
    async def test_missing_token_is_401_envelope(self, client):
        response = await client.get("/me")

        assert response.status_code == 401
        assert response.headers["WWW-Authenticate"] == "Bearer"
        body = response.json()
        assert body["status"] == 401
        assert body["error"] == "Unauthorized"
        assert body["message"] == "Authentication token required"
        assert body["path"] == "/me"

    @pytest.mark.asyncio
    async def test_non_bearer_scheme_is_rejected(self, client):
        response = await client.get("/me", headers={"Authorization": "Basic YWxpY2U6cHc="})

        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_invalid_token_is_401(self, client):
        response = await client.get("/me", headers=bearer("garbage"))

        assert response.status_code == 401
        assert response.json()["message"] == "Invalid token"

    @pytest.mark.asyncio
    async def test_valid_token_exposes_principal(self, client):
        response = await client.get("/me", headers=bearer(issue_token(subject="s-1", roles=("USER",))))

        assert response.status_code == 200
        assert response.json() == {"subject": "s-1", "roles": ["ROLE_USER"]}

    @pytest.mark.asyncio
    async def test_admin_role_required(self, client):
        user_response = await client.get("/admin", headers=bearer(issue_token(roles=("USER",))))
        admin_response = await client.get("/admin", headers=bearer(issue_token(roles=("ADMIN",))))

        assert user_response.status_code == 403
        assert user_response.json()["exception"] == "HTTPException"
        assert admin_response.status_code == 200


class TestRequestIdMiddleware:
    @pytest.mark.asyncio
    async def test_generates_request_id(self, client):
        response = await client.get("/open")

        uuid.UUID(response.headers[REQUEST_ID_HEADER])

    @pytest.mark.asyncio
    async def test_echoes_valid_request_id(self, client):
        request_id = str(uuid.uuid4())

        response = await client.get("/open", headers={REQUEST_ID_HEADER: request_id})

        assert response.headers[REQUEST_ID_HEADER] == request_id

    @pytest.mark.asyncio
    async def test_replaces_malformed_request_id(self, client):
        response = await client.get("/open", headers={REQUEST_ID_HEADER: "not-a-uuid"})

        assert response.headers[REQUEST_ID_HEADER] != "not-a-uuid"

    @pytest.mark.asyncio
    async def test_binds_request_id_to_logging_context(self, client):
        request_id = str(uuid.uuid4())

        response = await client.get("/context", headers={REQUEST_ID_HEADER: request_id})

        assert response.json() == {"request_id": request_id}
        assert request_id_context.get() == NO_REQUEST_ID


class TestLoggingMiddleware:
    @pytest.mark.asyncio
    async def test_logs_arrival_and_completion(self, client, caplog):
        caplog.set_level(logging.INFO, logger="auth_service.tests.access")

        await client.get("/me", headers=bearer(issue_token(username="carol")))

        messages = [r.getMessage() for r in caplog.records if r.name == "auth_service.tests.access"]
        assert messages[0].startswith("Incoming request: method=GET uri=/me")
        finished = json.loads(messages[-1])
        assert finished["status_code"] == 200
        assert finished["user"] == "carol"
        assert "Authorization" not in messages[-1]

    @pytest.mark.asyncio
    async def test_anonymous_user_when_unauthenticated(self, client, caplog):
        caplog.set_level(logging.INFO, logger="auth_service.tests.access")

        await client.get("/me")

        messages = [r.getMessage() for r in caplog.records if r.name == "auth_service.tests.access"]
        finished = json.loads(messages[-1])
        assert finished["status_code"] == 401
        assert finished["user"] == "anonymous"
