"""
Shared test fixtures for powerlog tests.

CHANGELOG:
- 2026-10-16: Initial creation

TODO:
- None
"""

from unittest.mock import AsyncMock, MagicMock

import pytest

# All Settings environment variable names, used for cleanup.
_ALL_ENV_VARS = (
    "DATABASE_URL",
    "LOG_LEVEL",
    "S3_BUCKET",
    "S3_ENDPOINT_URL",
    "AWS_REGION",
    "AWS_ACCESS_KEY_ID",
    "AWS_SECRET_ACCESS_KEY",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch, tmp_path: str) -> None:
    """Remove all powerlog env vars and isolate from .env files before each test.

    Changes working directory to tmp_path so no .env file is accidentally
    loaded by Pydantic BaseSettings.
    """
    for var in _ALL_ENV_VARS:
        monkeypatch.delenv(var, raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture()
def database_url(monkeypatch: pytest.MonkeyPatch) -> str:
    """Set DATABASE_URL and return it."""
    url = "postgresql+asyncpg://u:p@localhost/power"
    monkeypatch.setenv("DATABASE_URL", url)
    return url


@pytest.fixture()
def mock_connection() -> AsyncMock:
    """Create a mock AsyncConnection whose execute() returns a mock result."""
    connection = AsyncMock()
    connection.execute.return_value = MagicMock()
    return connection
