"""Shared test fixtures for the Tonish API."""

import pytest
import pytest_asyncio

from tonish.config import AISettings, AppSettings, AuthSettings, DatabaseSettings, ServerSettings
from tonish.data import NotebookStore, TaskStore, TonishDatabase, UserStore


@pytest.fixture
def mock_settings(tmp_path) -> AppSettings:
    """Return AppSettings with test defaults (temp database, known JWT secret)."""
    return AppSettings(
        log_level="DEBUG",
        server=ServerSettings(auth_required=False),
        database=DatabaseSettings(path=str(tmp_path / "tonish-test.db")),
        auth=AuthSettings(
            jwt_secret="test-jwt-secret-with-enough-length",  # type: ignore[arg-type]
            registration_enabled=True,
        ),
        ai=AISettings(url="http://ollama.test:11434", model="test-model", timeout_seconds=1.0),
    )


@pytest_asyncio.fixture
async def database(tmp_path):
    """A connected SQLite database in a temp directory."""
    db = TonishDatabase(str(tmp_path / "stores.db"))
    await db.connect()
    yield db
    await db.close()


@pytest.fixture
def task_store(database: TonishDatabase) -> TaskStore:
    return TaskStore(database)


@pytest.fixture
def notebook_store(database: TonishDatabase) -> NotebookStore:
    return NotebookStore(database)


@pytest.fixture
def user_store(database: TonishDatabase) -> UserStore:
    return UserStore(database)
