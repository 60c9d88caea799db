"""
Timestamp column migration for the power table.

Converts ``power.timestamp`` from TEXT to a native TIMESTAMP in four ordered
steps through a helper column ``t``:

1. Add nullable helper column ``t TIMESTAMP``.
2. Backfill ``t`` by casting every text timestamp.
3. Change the column type of ``timestamp`` using ``t`` as source.
4. Drop ``t``.

A value that fails to parse in step 2 raises :class:`TimestampParseError`
and step 3 is never issued. The caller owns the transaction: run this inside
``engine.begin()`` so PostgreSQL rolls back step 1 on failure.

CHANGELOG:
- 2026-10-16: Skip when the column is already a native timestamp
- 2026-10-16: Initial creation

TODO:
- None
"""

import logging

from sqlalchemy import text
from sqlalchemy.exc import DBAPIError
from sqlalchemy.ext.asyncio import AsyncConnection

logger = logging.getLogger(__name__)

# information_schema.columns.data_type values for the two layouts.
TEXT_TYPE = "text"
NATIVE_TIMESTAMP_TYPE = "timestamp without time zone"

BACKFILL_STEP = "backfill_helper_column"

# Ordered (step name, SQL) pairs. Order is load-bearing: the type change
# must only run once every row has been parsed into t.
MIGRATION_STEPS: tuple[tuple[str, str], ...] = (
    ("add_helper_column", "ALTER TABLE power ADD COLUMN t TIMESTAMP NULL"),
    (BACKFILL_STEP, "UPDATE power SET t = timestamp::TIMESTAMP"),
    (
        "alter_column_type",
        "ALTER TABLE power ALTER COLUMN timestamp TYPE TIMESTAMP USING t",
    ),
    ("drop_helper_column", "ALTER TABLE power DROP COLUMN t"),
)

_COLUMN_TYPE_SQL = (
    "SELECT data_type FROM information_schema.columns "
    "WHERE table_schema = current_schema() "
    "AND table_name = 'power' AND column_name = 'timestamp'"
)


class TimestampMigrationError(RuntimeError):
    """A timestamp migration step failed.

    Attributes:
        step: Name of the step that failed, or ``"precheck"``.
    """

    def __init__(self, step: str, message: str) -> None:
        super().__init__(f"Timestamp migration failed at {step}: {message}")
        self.step = step


class TimestampParseError(TimestampMigrationError):
    """A text timestamp could not be parsed during the backfill."""


async def get_timestamp_column_type(connection: AsyncConnection) -> str | None:
    """Return the current data type of ``power.timestamp``.

    Args:
        connection: Async database connection.

    Returns:
        The ``information_schema`` data type name, or None if the power
        table or its timestamp column does not exist.
    """
    result = await connection.execute(text(_COLUMN_TYPE_SQL))
    return result.scalar_one_or_none()


async def migrate_timestamp(connection: AsyncConnection) -> bool:
    """Convert ``power.timestamp`` from TEXT to TIMESTAMP.

    Args:
        connection: Async connection with an open transaction.

    Returns:
        True if the column was converted, False if it already was a native
        timestamp and nothing ran.

    Raises:
        TimestampParseError: A row's text timestamp is not a valid timestamp.
        TimestampMigrationError: The power table is missing or another step
            failed.
    """
    current_type = await get_timestamp_column_type(connection)
    if current_type is None:
        raise TimestampMigrationError("precheck", "power.timestamp does not exist")
    if current_type == NATIVE_TIMESTAMP_TYPE:
        logger.info("power.timestamp is already %s, nothing to do", current_type)
        return False

    logger.info("Migrating power.timestamp from %s to TIMESTAMP", current_type)
    for step, sql in MIGRATION_STEPS:
        logger.info("Timestamp migration step %s: %s", step, sql)
        try:
            result = await connection.execute(text(sql))
        except DBAPIError as exc:
            reason = str(exc.orig) if exc.orig is not None else str(exc)
            logger.error("Timestamp migration step %s failed: %s", step, reason)
            if step == BACKFILL_STEP:
                raise TimestampParseError(step, reason) from exc
            raise TimestampMigrationError(step, reason) from exc
        if step == BACKFILL_STEP:
            logger.info("Backfilled %s rows", result.rowcount)

    logger.info("power.timestamp migrated to TIMESTAMP")
    return True
