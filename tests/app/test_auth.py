"""Tests for registration, login, sessions, and route protection."""

import pytest
from fastapi.testclient import TestClient
from unittest.mock import patch, MagicMock
from psycopg.errors import UniqueViolation

from paywall.app.app import app
from paywall.app.constants import COOKIE_NAME
from paywall.app.passwords import hash_password
from paywall.app.session import issue_session_token


@pytest.fixture
def fresh_client() -> TestClient:
    """A client with its own cookie jar."""
    return TestClient(app)


class TestRegister:
    """Test POST /auth/register."""

    @patch("paywall.app.routers.auth.create_user")
    @patch("paywall.app.routers.auth.get_user_by_email")
    def test_register_creates_user_and_sets_cookie(
        self, mock_get_by_email: MagicMock, mock_create: MagicMock, fresh_client, user_factory
    ):
        """A new email creates a 'user' account and starts a session."""
        mock_get_by_email.return_value = None
        mock_create.return_value = user_factory.make(
            {"email": "new@example.com", "name": "New Reader"}
        )

        response = fresh_client.post(
            "/auth/register",
            json={"email": "new@example.com", "password": "secret123", "name": "New Reader"},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["user"] == {
            "id": 1,
            "email": "new@example.com",
            "name": "New Reader",
            "role": "user",
        }
        assert COOKIE_NAME in response.cookies

        kwargs = mock_create.call_args.kwargs
        assert kwargs["role"] == "user"
        assert kwargs["login_method"] == "email"
        # Only the salted hash is stored, never the password itself
        assert kwargs["password_hash"] != "secret123"
        assert ":" in kwargs["password_hash"]

    @patch("paywall.app.routers.auth.create_user")
    @patch("paywall.app.routers.auth.get_user_by_email")
    def test_register_duplicate_email_conflicts(
        self, mock_get_by_email: MagicMock, mock_create: MagicMock, fresh_client, user_factory
    ):
        """Registering an email that is already taken returns 409."""
        mock_get_by_email.return_value = user_factory.make()

        response = fresh_client.post(
            "/auth/register",
            json={"email": "reader@example.com", "password": "secret123", "name": "Again"},
        )

        assert response.status_code == 409
        mock_create.assert_not_called()
        assert COOKIE_NAME not in response.cookies

    @patch("paywall.app.routers.auth.create_user")
    @patch("paywall.app.routers.auth.get_user_by_email")
    def test_register_race_on_unique_email_conflicts(
        self, mock_get_by_email: MagicMock, mock_create: MagicMock, fresh_client
    ):
        """A unique violation from a concurrent registration is also a 409."""
        mock_get_by_email.return_value = None
        mock_create.side_effect = UniqueViolation()

        response = fresh_client.post(
            "/auth/register",
            json={"email": "new@example.com", "password": "secret123", "name": "New Reader"},
        )

        assert response.status_code == 409

    @pytest.mark.parametrize(
        "body",
        [
            {"email": "not-an-email", "password": "secret123", "name": "Reader"},
            {"email": "new@example.com", "password": "short", "name": "Reader"},
            {"email": "new@example.com", "password": "secret123", "name": "R"},
        ],
    )
    def test_register_validates_input(self, body, fresh_client):
        """Invalid email, short password, or short name is rejected before any DB call."""
        response = fresh_client.post("/auth/register", json=body)
        assert response.status_code == 422


class TestLogin:
    """Test POST /auth/login."""

    @patch("paywall.app.routers.auth.record_sign_in")
    @patch("paywall.app.routers.auth.get_user_by_email")
    def test_login_with_correct_password(
        self, mock_get_by_email: MagicMock, mock_record: MagicMock, fresh_client, user_factory
    ):
        """Correct credentials start a session and stamp the sign-in."""
        mock_get_by_email.return_value = user_factory.make(
            {"password_hash": hash_password("secret123")}
        )

        response = fresh_client.post(
            "/auth/login", json={"email": "reader@example.com", "password": "secret123"}
        )

        assert response.status_code == 200
        assert response.json()["user"]["email"] == "reader@example.com"
        assert "password_hash" not in response.json()["user"]
        assert COOKIE_NAME in response.cookies
        mock_record.assert_called_once_with(1)

    @patch("paywall.app.routers.auth.record_sign_in")
    @patch("paywall.app.routers.auth.get_user_by_email")
    def test_wrong_password_and_unknown_email_look_the_same(
        self, mock_get_by_email: MagicMock, mock_record: MagicMock, fresh_client, user_factory
    ):
        """Both failures return 401 with the same message, so registered emails can't be discovered."""
        mock_get_by_email.return_value = user_factory.make(
            {"password_hash": hash_password("secret123")}
        )
        wrong_password = fresh_client.post(
            "/auth/login", json={"email": "reader@example.com", "password": "wrong-one"}
        )

        mock_get_by_email.return_value = None
        unknown_email = fresh_client.post(
            "/auth/login", json={"email": "nobody@example.com", "password": "secret123"}
        )

        assert wrong_password.status_code == 401
        assert unknown_email.status_code == 401
        assert wrong_password.json() == unknown_email.json()
        mock_record.assert_not_called()

    @patch("paywall.app.routers.auth.get_user_by_email")
    def test_external_identity_user_cannot_password_login(
        self, mock_get_by_email: MagicMock, fresh_client, user_factory
    ):
        """Users without a password hash can't log in with any password."""
        mock_get_by_email.return_value = user_factory.make(
            {"password_hash": None, "external_id": "ext-123"}
        )

        response = fresh_client.post(
            "/auth/login", json={"email": "reader@example.com", "password": "anything"}
        )

        assert response.status_code == 401


class TestSession:
    """Test GET /auth/me and POST /auth/logout."""

    def test_me_anonymous_returns_null(self, fresh_client):
        response = fresh_client.get("/auth/me")
        assert response.status_code == 200
        assert response.json() is None

    @patch("paywall.app.session.get_user_by_id")
    def test_me_with_session_cookie(
        self, mock_get_user: MagicMock, fresh_client, user_factory
    ):
        """A valid session cookie resolves to the stored user."""
        user = user_factory.make()
        mock_get_user.return_value = user
        fresh_client.cookies.set(COOKIE_NAME, issue_session_token(user))

        response = fresh_client.get("/auth/me")

        assert response.status_code == 200
        assert response.json() == {
            "id": 1,
            "email": "reader@example.com",
            "name": "Test Reader",
            "role": "user",
        }
        mock_get_user.assert_called_once_with(1)

    @patch("paywall.app.session.get_user_by_id")
    def test_me_with_tampered_cookie_is_anonymous(
        self, mock_get_user: MagicMock, fresh_client, user_factory
    ):
        """A token that fails verification is treated like no token at all."""
        token = issue_session_token(user_factory.make())
        fresh_client.cookies.set(COOKIE_NAME, token[:-4] + "AAAA")

        response = fresh_client.get("/auth/me")

        assert response.status_code == 200
        assert response.json() is None
        mock_get_user.assert_not_called()

    @patch("paywall.app.session.get_user_by_id")
    def test_me_for_deleted_user_is_anonymous(
        self, mock_get_user: MagicMock, fresh_client, user_factory
    ):
        mock_get_user.return_value = None
        fresh_client.cookies.set(COOKIE_NAME, issue_session_token(user_factory.make()))

        response = fresh_client.get("/auth/me")

        assert response.json() is None

    def test_logout_clears_cookie(self, fresh_client):
        response = fresh_client.post("/auth/logout")

        assert response.status_code == 200
        assert response.json() == {"success": True}
        set_cookie = response.headers["set-cookie"]
        assert set_cookie.startswith(f"{COOKIE_NAME}=")
        assert "Max-Age=0" in set_cookie


class TestProtectedEndpoints:
    """Test that user and admin routes are properly protected."""

    @pytest.mark.parametrize(
        "method,path",
        [
            ("GET", "/subscriptions/mine"),
            ("POST", "/subscriptions/pix"),
            ("POST", "/admin/content"),
            ("PATCH", "/admin/content/1"),
            ("DELETE", "/admin/content/1"),
            ("GET", "/admin/users"),
            ("GET", "/admin/subscriptions"),
            ("GET", "/environment"),
        ],
    )
    def test_endpoints_require_login(self, method, path, client: TestClient):
        """Anonymous callers get 401."""
        response = client.request(method, path, json={})
        assert response.status_code == 401

    @pytest.mark.parametrize(
        "method,path",
        [
            ("POST", "/admin/content"),
            ("PATCH", "/admin/content/1"),
            ("DELETE", "/admin/content/1"),
            ("GET", "/admin/users"),
            ("GET", "/admin/subscriptions"),
            ("GET", "/environment"),
        ],
    )
    def test_admin_endpoints_require_admin_role(
        self, method, path, user_client: TestClient
    ):
        """Regular users get 403 on admin routes."""
        body = {}
        if path == "/admin/content":
            body = {"title": "T", "url": "https://example.com/x"}
        response = user_client.request(method, path, json=body)
        assert response.status_code == 403

    def test_environment_for_admin(self, admin_client: TestClient):
        response = admin_client.get("/environment")
        assert response.status_code == 200
        assert response.json() == {"environment": "dev"}

    def test_health_endpoint_no_auth(self, client: TestClient):
        """GET /health should remain public."""
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "healthy"}
