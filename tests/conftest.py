"""
Pytest configuration and fixtures for the task manager tests.

Every test gets a fresh in-memory SQLite database, so tests never share rows.
"""

from collections.abc import AsyncGenerator, Callable, Generator
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from taskmanager.core.config import Settings
from taskmanager.core.container import Container, clear_container_cache
from taskmanager.core.security import PasswordHasher
from taskmanager.main import create_app
from taskmanager.services.auth_service import AuthService
from taskmanager.services.task_service import TaskService
from taskmanager.services.token_service import TokenService
from taskmanager.storage.database import create_engine, create_schema, create_session_factory
from taskmanager.storage.tasks import SqlTaskStore
from taskmanager.storage.users import SqlUserStore

TEST_JWT_SECRET = "test-signing-secret-with-at-least-32-bytes"


class FakeClock:
    """Deterministic clock: every call returns a time one second later."""

    def __init__(self, start: datetime | None = None, step: timedelta = timedelta(seconds=1)):
        self.current = start or datetime(2024, 1, 1, tzinfo=timezone.utc)
        self.step = step

    def __call__(self) -> datetime:
        value = self.current
        self.current = self.current + self.step
        return value


@pytest.fixture(autouse=True)
def clear_caches() -> Generator[None, None, None]:
    """
    Clear all caches before and after each test.

    This ensures test isolation by resetting singleton state.
    """
    clear_container_cache()
    yield
    clear_container_cache()


@pytest.fixture
def temp_config_file(tmp_path: Path) -> Path:
    """
    Create a temporary config.yaml file for testing.

    Args:
        tmp_path: Pytest tmp_path fixture.

    Returns:
        Path to the temporary config file.
    """
    config_content = f"""
environment: "test"
jwt_secret: "{TEST_JWT_SECRET}"

database:
  url: "sqlite+aiosqlite://"
  seed_demo_data: false

auth:
  token_expires_in: "1h"
  bcrypt_rounds: 4

metrics:
  enabled: true
  refresh_interval_seconds: 60

rate_limit:
  max_requests: 10000
"""
    config_path = tmp_path / "config.yaml"
    config_path.write_text(config_content)
    return config_path


@pytest.fixture
def test_settings(temp_config_file: Path) -> Settings:
    """
    Create test settings from temporary config file.

    Args:
        temp_config_file: Path to temporary config file.

    Returns:
        Settings instance loaded from temporary config.
    """
    return Settings.from_yaml(temp_config_file)


@pytest.fixture
def test_container(test_settings: Settings) -> Container:
    """
    Create a test container with test settings.

    Args:
        test_settings: Test settings fixture.

    Returns:
        Container instance with test settings.
    """
    return Container(settings=test_settings)


@pytest.fixture
def app(test_container: Container) -> FastAPI:
    """Create an application bound to the test container."""
    return create_app(test_container)


@pytest.fixture
def client(app: FastAPI) -> Generator[TestClient, None, None]:
    """
    Create a test client for the FastAPI application.

    Entering the client runs the lifespan, which creates the schema.

    Yields:
        TestClient instance.
    """
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def register_user(client: TestClient) -> Callable[..., dict[str, Any]]:
    """
    Return a helper that registers a user over HTTP.

    The helper returns the ``data`` payload: ``{"user": ..., "token": ...}``.
    """

    def _register(
        email: str = "alice@example.com",
        password: str = "secret123",
        name: str = "Alice",
    ) -> dict[str, Any]:
        response = client.post(
            "/api/v1/auth/register",
            json={"name": name, "email": email, "password": password},
        )
        assert response.status_code == 201, response.text
        return response.json()["data"]

    return _register


def auth_headers(token: str) -> dict[str, str]:
    """Authorization header for a bearer token."""
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def headers_for() -> Callable[[str], dict[str, str]]:
    """Expose auth_headers to test modules."""
    return auth_headers


# =============================================================================
# Service-level fixtures (no HTTP)
# =============================================================================


@pytest.fixture
async def engine(test_settings: Settings) -> AsyncGenerator[AsyncEngine, None]:
    """Fresh in-memory database with the schema created."""
    engine = create_engine(test_settings.database)
    await create_schema(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return create_session_factory(engine)


@pytest.fixture
def user_store(session_factory: async_sessionmaker[AsyncSession]) -> SqlUserStore:
    return SqlUserStore(session_factory)


@pytest.fixture
def task_store(session_factory: async_sessionmaker[AsyncSession]) -> SqlTaskStore:
    return SqlTaskStore(session_factory)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def password_hasher() -> PasswordHasher:
    return PasswordHasher(rounds=4)


@pytest.fixture
def token_service() -> TokenService:
    return TokenService(secret=TEST_JWT_SECRET, expires_in=timedelta(hours=1))


@pytest.fixture
def auth_service(
    user_store: SqlUserStore,
    token_service: TokenService,
    password_hasher: PasswordHasher,
) -> AuthService:
    return AuthService(
        user_store=user_store,
        token_service=token_service,
        password_hasher=password_hasher,
    )


@pytest.fixture
def task_service(task_store: SqlTaskStore, clock: FakeClock) -> TaskService:
    return TaskService(task_store=task_store, clock=clock)
