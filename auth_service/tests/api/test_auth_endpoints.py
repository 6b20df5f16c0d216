"""API tests for signup and login."""

import json
import logging

import pytest


def signup_form(**overrides) -> dict[str, str]:
    user = {
        "username": "alice",
        "email": "alice@example.com",
        "password": "s3cret!",
        "role": "USER",
    }
    user.update(overrides)
    return {"user": json.dumps(user)}


class TestSignup:
    @pytest.mark.asyncio
    async def test_signup_without_photo(self, client, identity_backend):
        # Act
        response = await client.post("/api/v1/auth/signup", data=signup_form())

        # Assert
        assert response.status_code == 201
        body = response.json()
        assert body["username"] == "alice"
        assert body["role"] == "USER"
        assert body["profilePhoto"] == ""
        assert "password" not in body
        assert response.headers["Location"] == f"/api/v1/users/{body['id']}"
        assert body["id"] in identity_backend.identities

    @pytest.mark.asyncio
    async def test_signup_with_photo(self, client, file_storage):
        response = await client.post(
            "/api/v1/auth/signup",
            data=signup_form(role="ADMIN"),
            files={"profilePhoto": ("avatar.jpg", b"\xff\xd8\xff", "image/jpeg")},
        )

        assert response.status_code == 201
        (key,) = file_storage.objects
        assert key.startswith("profile-photos/alice/")
        assert response.json()["profilePhoto"] == f"https://photos.s3.sa-east-1.amazonaws.com/{key}"

    @pytest.mark.asyncio
    async def test_missing_field_is_400(self, client, identity_backend):
        response = await client.post("/api/v1/auth/signup", data=signup_form(email=""))

        assert response.status_code == 400
        assert response.json()["message"] == "Email is required"
        assert identity_backend.calls == []

    @pytest.mark.asyncio
    async def test_malformed_user_json_is_400(self, client):
        response = await client.post("/api/v1/auth/signup", data={"user": "{not json"})

        assert response.status_code == 400
        assert response.json()["message"] == "Invalid user payload"

    @pytest.mark.asyncio
    async def test_malformed_user_json_does_not_log_password(self, client, caplog):
        caplog.set_level(logging.INFO, logger="auth_service")
        password = "Tr0ub4dor and 3 more words"
        user = '{"username": "alice", "email": "a@x", "role": "USER", "password": "' + password + '",}'

        response = await client.post("/api/v1/auth/signup", data={"user": user})

        assert response.status_code == 400
        logged = "\n".join(record.getMessage() for record in caplog.records)
        assert "Invalid user payload" in logged
        assert "more words" not in logged
        assert "Tr0ub4dor" not in logged

    @pytest.mark.asyncio
    async def test_unknown_role_is_400(self, client):
        response = await client.post("/api/v1/auth/signup", data=signup_form(role="SUPERUSER"))

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_backend_rejection_is_502(self, client, identity_backend):
        identity_backend.create_status = 409

        response = await client.post("/api/v1/auth/signup", data=signup_form())

        assert response.status_code == 502
        assert response.json()["exception"] == "BackendError"
        assert "status=409" not in response.text


class TestLogin:
    @pytest.mark.asyncio
    async def test_login_returns_access_token(self, client):
        await client.post("/api/v1/auth/signup", data=signup_form())

        response = await client.post(
            "/api/v1/auth/login", data={"username": "alice", "password": "s3cret!"}
        )

        assert response.status_code == 200
        assert response.json() == {"accessToken": "token-for-alice"}

    @pytest.mark.asyncio
    async def test_wrong_password_is_401(self, client):
        await client.post("/api/v1/auth/signup", data=signup_form())

        response = await client.post(
            "/api/v1/auth/login", data={"username": "alice", "password": "nope"}
        )

        assert response.status_code == 401
        assert response.json()["exception"] == "AuthenticationError"

    @pytest.mark.asyncio
    async def test_missing_password_is_400(self, client, identity_backend):
        response = await client.post("/api/v1/auth/login", data={"username": "alice"})

        assert response.status_code == 400
        assert response.json()["message"] == "Password is required"
        assert identity_backend.calls == []

    @pytest.mark.asyncio
    async def test_failed_logins_do_not_trip_breaker(self, client, app):
        for _ in range(10):
            response = await client.post(
                "/api/v1/auth/login", data={"username": "ghost", "password": "x"}
            )
            assert response.status_code == 401

        status = app.state.resilience_manager.get_all_status()["keycloak"]
        assert status["state"] == "closed"
