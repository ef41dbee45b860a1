"""Unit tests for HTTP dependencies."""

import pytest
from sqlmodel import Session

from src.storefront.api.http.deps import (
    extract_session_token,
    get_current_user,
    require_admin,
)
from src.storefront.core.errors import (
    AuthenticationError,
    AuthorizationError,
    NotFoundError,
)
from src.storefront.entities.core.user import User, UserRole


class TestExtractSessionToken:
    def test_reads_cookie(self, request_factory):
        request = request_factory({"Cookie": "token=from-cookie"})

        assert extract_session_token(request) == "from-cookie"

    def test_falls_back_to_bearer(self, request_factory):
        request = request_factory({"Authorization": "Bearer from-header"})

        assert extract_session_token(request) == "from-header"

    def test_cookie_wins_over_header(self, request_factory):
        request = request_factory(
            {"Cookie": "token=from-cookie", "Authorization": "Bearer from-header"}
        )

        assert extract_session_token(request) == "from-cookie"

    @pytest.mark.parametrize(
        "headers",
        [{}, {"Authorization": "Basic abc"}, {"Authorization": "Bearer "}],
    )
    def test_no_token(self, request_factory, headers):
        assert extract_session_token(request_factory(headers)) is None


class TestCurrentUser:
    @pytest.mark.asyncio
    async def test_resolves_principal(
        self, request_factory, session: Session, user_factory, jwt_generator, jwt_verifier
    ):
        user = user_factory()
        token = jwt_generator.generate_session_token(user)
        request = request_factory({"Authorization": f"Bearer {token}"})

        principal = await get_current_user(request, session, jwt_verifier)

        assert principal.id == user.id
        assert request.state.user.id == user.id
        assert request.state.claims.subject == user.id

    @pytest.mark.asyncio
    async def test_missing_token(self, request_factory, session: Session, jwt_verifier):
        with pytest.raises(AuthenticationError) as exc_info:
            await get_current_user(request_factory({}), session, jwt_verifier)

        assert exc_info.value.message == "Please login to continue"
        assert exc_info.value.status_code == 401

    @pytest.mark.asyncio
    async def test_invalid_token(self, request_factory, session: Session, jwt_verifier):
        request = request_factory({"Cookie": "token=garbage"})

        with pytest.raises(AuthenticationError) as exc_info:
            await get_current_user(request, session, jwt_verifier)

        assert exc_info.value.message == "Invalid or expired session"

    @pytest.mark.asyncio
    async def test_deleted_user(
        self, request_factory, session: Session, jwt_generator, jwt_verifier
    ):
        ghost = User(name="Ghost", email="ghost@example.com", password_hash="x")
        token = jwt_generator.generate_session_token(ghost)

        with pytest.raises(NotFoundError) as exc_info:
            await get_current_user(
                request_factory({"Cookie": f"token={token}"}), session, jwt_verifier
            )

        assert exc_info.value.message == "User not found"


class TestRequireAdmin:
    @pytest.mark.asyncio
    async def test_allows_admin(self):
        admin = User(name="A", email="a@example.com", password_hash="x", role=UserRole.ADMIN)

        assert await require_admin(admin) is admin

    @pytest.mark.asyncio
    async def test_blocks_regular_user(self):
        user = User(name="U", email="u@example.com", password_hash="x")

        with pytest.raises(AuthorizationError) as exc_info:
            await require_admin(user)

        assert exc_info.value.status_code == 403
        assert exc_info.value.message == "user can not access this resource"
