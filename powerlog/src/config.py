"""
powerlog configuration from environment variables using Pydantic BaseSettings.

All configuration values are loaded from environment variables (or a
``.env`` file) at startup. No hardcoded hosts or credentials.

CHANGELOG:
- 2026-10-16: Add S3 export settings
- 2026-10-16: Initial creation

TODO:
- None
"""

import logging

from pydantic import field_validator
from pydantic_settings import BaseSettings

_LOG_LEVELS = frozenset({"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"})


class Settings(BaseSettings):
    """powerlog settings loaded from environment variables.

    Attributes:
        DATABASE_URL: PostgreSQL connection string (asyncpg).
        LOG_LEVEL: Root log level name.
        S3_BUCKET: Bucket receiving the hourly export files.
        S3_ENDPOINT_URL: Optional S3 endpoint override (e.g. localstack).
        AWS_REGION: Region for the S3 client.
        AWS_ACCESS_KEY_ID: Optional access key; boto3 default chain when unset.
        AWS_SECRET_ACCESS_KEY: Optional secret key; boto3 default chain when unset.
    """

    DATABASE_URL: str
    LOG_LEVEL: str = "INFO"
    S3_BUCKET: str = "cron"
    S3_ENDPOINT_URL: str | None = None
    AWS_REGION: str = "af-south-1"
    AWS_ACCESS_KEY_ID: str | None = None
    AWS_SECRET_ACCESS_KEY: str | None = None

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}

    @field_validator("LOG_LEVEL")
    @classmethod
    def log_level_must_be_known(cls, v: str) -> str:
        """Normalize LOG_LEVEL to upper case and reject unknown names."""
        level = v.upper()
        if level not in _LOG_LEVELS:
            raise ValueError(
                f"LOG_LEVEL must be one of {sorted(_LOG_LEVELS)} (got: '{v}')"
            )
        return level

    @property
    def log_level(self) -> int:
        """Numeric logging level for ``LOG_LEVEL``."""
        return logging.getLevelNamesMapping()[self.LOG_LEVEL]


def get_settings() -> Settings:
    """Create and return a Settings instance.

    Returns:
        Settings: Validated configuration from environment variables.
    """
    return Settings()
