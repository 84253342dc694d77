import pytest
from typing import Iterator
from datetime import datetime, timezone
from fastapi.testclient import TestClient

from paywall.app.app import app
from paywall.app.session import SessionClaims
from paywall.models.user import Role, User


# Shared test user data
TEST_USER_ID = 1
TEST_ADMIN_ID = 99


def _create_test_user(role: Role = "user") -> User:
    """Create a test user with specified role."""
    user_id = TEST_ADMIN_ID if role == "admin" else TEST_USER_ID
    return User(
        id=user_id,
        email=f"{role}@example.com",
        name=f"Test {role.capitalize()}",
        role=role,
        created_at=datetime.now(timezone.utc),
        updated_at=datetime.now(timezone.utc),
    )


def _authenticated_client(token: str, role: Role) -> Iterator[TestClient]:
    """Yield a client whose bearer token resolves to a user with `role`.

    Token decoding and the user lookup are swapped out at the location where the
    session module uses them, and restored afterwards.
    """
    user = _create_test_user(role=role)

    def mock_decode(candidate: str):
        if candidate == token:
            return SessionClaims(
                id=user.id, email=user.email or "", name=user.name or "", role=role
            )
        return None

    def mock_get_user_by_id(user_id: int):
        return user if user_id == user.id else None

    from paywall.app import session

    original_decode = session.decode_session_token
    original_get_user = session.get_user_by_id
    session.decode_session_token = mock_decode  # type: ignore[assignment]
    session.get_user_by_id = mock_get_user_by_id  # type: ignore[assignment]

    try:
        client = TestClient(app)
        client.headers = {"Authorization": f"Bearer {token}"}
        yield client
    finally:
        session.decode_session_token = original_decode  # type: ignore[assignment]
        session.get_user_by_id = original_get_user  # type: ignore[assignment]


@pytest.fixture(scope="session")
def client() -> TestClient:
    """Unauthenticated test client."""
    return TestClient(app)


@pytest.fixture(scope="function")
def user_client() -> Iterator[TestClient]:
    """Test client authenticated as a regular user (id=1)."""
    yield from _authenticated_client("user_token", role="user")


@pytest.fixture(scope="function")
def admin_client() -> Iterator[TestClient]:
    """Test client authenticated as an admin (id=99)."""
    yield from _authenticated_client("admin_token", role="admin")
