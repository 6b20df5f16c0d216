"""Unit tests for the Page and UserSummary DTOs and the User entity."""

import pytest
from pydantic import ValidationError as PydanticValidationError

from auth_service.application.dtos.user_dtos import Page, UserSummary
from auth_service.core.domain.entities.user import AccessToken, User, UserRole


class TestPage:
    @pytest.mark.parametrize(
        "total, size, pages",
        [(0, 10, 0), (1, 10, 1), (10, 10, 1), (11, 10, 2), (25, 5, 5), (7, 1, 7)],
    )
    def test_total_pages_is_ceiling(self, total, size, pages):
        page = Page[UserSummary](content=[], page=0, size=size, total_elements=total)
        assert page.total_pages == pages

    def test_total_pages_follows_total_elements(self):
        page = Page[UserSummary](content=[], page=0, size=10, total_elements=5)

        updated = page.model_copy(update={"total_elements": 31})

        assert updated.total_pages == 4

    @pytest.mark.parametrize("size", [0, -1])
    def test_rejects_non_positive_size(self, size):
        with pytest.raises(PydanticValidationError):
            Page[UserSummary](content=[], page=0, size=size, total_elements=0)

    def test_serializes_with_camel_case_totals(self):
        summary = UserSummary(id="1", username="alice", email="a@x.io", role=UserRole.USER)
        page = Page[UserSummary](content=[summary], page=2, size=1, total_elements=3)

        data = page.model_dump(by_alias=True, mode="json")

        assert data == {
            "content": [
                {
                    "id": "1",
                    "username": "alice",
                    "email": "a@x.io",
                    "role": "USER",
                    "profilePhoto": "",
                }
            ],
            "page": 2,
            "size": 1,
            "totalElements": 3,
            "totalPages": 3,
        }


class TestUserSerialization:
    def test_password_is_never_serialized(self):
        user = User(
            id="1", username="alice", email="a@x.io", password="secret", role=UserRole.ADMIN
        )

        assert "password" not in user.model_dump()
        assert "secret" not in user.model_dump_json()
        assert "secret" not in repr(user)

    def test_summary_drops_password(self):
        user = User(id="1", username="alice", password="secret", role=UserRole.USER)

        summary = UserSummary.from_user(user)

        assert "password" not in summary.model_dump()
        assert summary.profile_photo == ""

    def test_user_accepts_camel_case_photo(self):
        user = User.model_validate({"username": "bob", "profilePhoto": "https://b.s3.x/p.png"})
        assert user.profile_photo == "https://b.s3.x/p.png"

    @pytest.mark.parametrize(
        "names, role",
        [
            (["default-roles-test", "ADMIN"], UserRole.ADMIN),
            (["USER", "ADMIN"], UserRole.USER),
            (["offline_access"], UserRole.USER),
            ([], UserRole.USER),
        ],
    )
    def test_role_resolution(self, names, role):
        assert UserRole.from_role_names(names) is role


def test_access_token_round_trips_opaque_string():
    token = AccessToken("tok-123")

    assert token.access_token == "tok-123"
    assert token.model_dump(by_alias=True) == {"accessToken": "tok-123"}
