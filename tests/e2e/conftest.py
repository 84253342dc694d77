import os
from pathlib import Path
from typing import Iterator
from unittest.mock import MagicMock

import pytest
from testcontainers.postgres import PostgresContainer
from alembic.config import Config
from alembic import command
from fastapi.testclient import TestClient

from paywall.db.connection import DatabaseProvider, set_provider

# Ensure allowed environment for env_loader
os.environ.setdefault("ENV", "dev")

ADMIN_EMAIL = "admin@example.com"
ADMIN_PASSWORD = "admin-secret"


@pytest.fixture(scope="session")
def db_url() -> Iterator[str]:
    """Start a Postgres container, run migrations, and return the DB URL."""
    with PostgresContainer("postgres:16") as pg:
        raw_url = pg.get_connection_url()
        # Normalize to psycopg3-compatible URL if needed
        url = raw_url.replace("postgresql+psycopg2://", "postgresql://")
        os.environ["DATABASE_URL"] = url
        set_provider(DatabaseProvider(url=url))

        # Run Alembic migrations against this database
        repo_dir = Path(__file__).resolve().parents[2]
        alembic_cfg = Config(str(repo_dir / "alembic.ini"))
        command.upgrade(alembic_cfg, "head")

        yield url
        set_provider(None)


@pytest.fixture(autouse=True)
def _use_container_database(db_url: str) -> None:
    """Unit tests reset the provider between tests; point it back at the container."""
    set_provider(DatabaseProvider(url=db_url))


@pytest.fixture(scope="session")
def payment_client(db_url: str) -> Iterator[MagicMock]:
    """Stand-in for Mercado Pago, injected into every route that talks to it."""
    from paywall.app.app import app
    from paywall.app.dependencies import mercadopago_client

    mock_client = MagicMock()
    app.dependency_overrides[mercadopago_client] = lambda: mock_client
    yield mock_client
    app.dependency_overrides.pop(mercadopago_client, None)


@pytest.fixture(scope="session")
def client(db_url: str, payment_client: MagicMock) -> TestClient:
    """Anonymous test client."""
    from paywall.app.app import app

    return TestClient(app)


@pytest.fixture(scope="session")
def admin_client(db_url: str, payment_client: MagicMock) -> TestClient:
    """Client logged in (by cookie) as an admin created with the bootstrap command."""
    from paywall.app.app import app
    from paywall.cli.create_admin import ensure_admin

    ensure_admin(ADMIN_EMAIL, "Admin", ADMIN_PASSWORD)
    admin = TestClient(app)
    res = admin.post("/auth/login", json={"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD})
    assert res.status_code == 200
    return admin


@pytest.fixture
def new_user_client(db_url: str, payment_client: MagicMock) -> TestClient:
    """A fresh client for registering its own user."""
    from paywall.app.app import app

    return TestClient(app)
