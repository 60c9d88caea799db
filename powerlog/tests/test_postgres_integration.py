"""
End-to-end tests against a live PostgreSQL database.

Skipped unless ``POWERLOG_TEST_DATABASE_URL`` points at a disposable
database (``postgresql+asyncpg://...``). Every test resets the schema, so
never point this at data you want to keep.

CHANGELOG:
- 2026-10-16: Initial creation

TODO:
- None
"""

import os
from datetime import datetime

import pytest
from sqlalchemy import text
from sqlalchemy.exc import DBAPIError, IntegrityError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession
from sqlalchemy.schema import CreateTable, DropTable

from powerlog.src.db.schema import devices_table, power_table, reset_schema
from powerlog.src.db.session import create_engine
from powerlog.src.services.aggregation import get_hourly_power
from powerlog.src.services.timestamp_migration import (
    NATIVE_TIMESTAMP_TYPE,
    TEXT_TYPE,
    TimestampParseError,
    get_timestamp_column_type,
    migrate_timestamp,
)

TEST_DATABASE_URL = os.environ.get("POWERLOG_TEST_DATABASE_URL")

pytestmark = pytest.mark.skipif(
    not TEST_DATABASE_URL, reason="POWERLOG_TEST_DATABASE_URL not set",
)

INSERT_DEVICE = text("INSERT INTO devices (id, name, ipv6) VALUES (:id, :name, :ipv6)")
INSERT_READING = text(
    "INSERT INTO power (id, device_id, timestamp, power) "
    "VALUES (:id, :device_id, :timestamp, :power)"
)


async def _fresh_engine() -> AsyncEngine:
    engine = create_engine(TEST_DATABASE_URL)
    async with engine.begin() as connection:
        await reset_schema(connection)
    return engine


async def _seed(engine: AsyncEngine, readings: list[tuple[str, str, float]]) -> None:
    """Insert device d1 and (id, text timestamp, power) readings for it."""
    async with engine.begin() as connection:
        await connection.execute(INSERT_DEVICE, {"id": "d1", "name": "Meter", "ipv6": None})
        for reading_id, timestamp, power in readings:
            await connection.execute(
                INSERT_READING,
                {"id": reading_id, "device_id": "d1", "timestamp": timestamp, "power": power},
            )


async def _column_type(engine: AsyncEngine) -> str | None:
    async with engine.connect() as connection:
        return await get_timestamp_column_type(connection)


async def _rollup(engine: AsyncEngine) -> list[dict]:
    async with AsyncSession(engine) as session:
        return await get_hourly_power(session)


class TestSchemaReset:
    """reset_schema() against PostgreSQL."""

    @pytest.mark.asyncio()
    async def test_reset_twice_leaves_empty_tables(self) -> None:
        engine = await _fresh_engine()
        try:
            await _seed(engine, [("r1", "2024-01-01 10:15:00", 5.0)])
            for _ in range(2):
                async with engine.begin() as connection:
                    await reset_schema(connection)
                async with engine.connect() as connection:
                    devices = await connection.scalar(text("SELECT COUNT(*) FROM devices"))
                    readings = await connection.scalar(text("SELECT COUNT(*) FROM power"))
                assert (devices, readings) == (0, 0)
                assert await _column_type(engine) == TEXT_TYPE
        finally:
            await engine.dispose()

    @pytest.mark.asyncio()
    async def test_power_before_devices_fails(self) -> None:
        engine = await _fresh_engine()
        try:
            async with engine.begin() as connection:
                await connection.execute(DropTable(power_table))
                await connection.execute(DropTable(devices_table))
            with pytest.raises(DBAPIError):
                async with engine.begin() as connection:
                    await connection.execute(CreateTable(power_table))
        finally:
            await engine.dispose()

    @pytest.mark.asyncio()
    async def test_unknown_device_rejected(self) -> None:
        engine = await _fresh_engine()
        try:
            with pytest.raises(IntegrityError):
                async with engine.begin() as connection:
                    await connection.execute(
                        INSERT_READING,
                        {
                            "id": "r1",
                            "device_id": "ghost",
                            "timestamp": "2024-01-01 10:15:00",
                            "power": 1.0,
                        },
                    )
        finally:
            await engine.dispose()


class TestMigrationAndRollup:
    """migrate_timestamp() followed by get_hourly_power()."""

    @pytest.mark.asyncio()
    async def test_same_hour_is_summed(self) -> None:
        engine = await _fresh_engine()
        try:
            await _seed(engine, [
                ("r1", "2024-01-01 10:15:00", 5.0),
                ("r2", "2024-01-01 10:45:00", 7.0),
            ])
            async with engine.begin() as connection:
                assert await migrate_timestamp(connection) is True

            assert await _rollup(engine) == [
                {"device_id": "d1", "hour": datetime(2024, 1, 1, 10), "power": 12.0},
            ]
        finally:
            await engine.dispose()

    @pytest.mark.asyncio()
    async def test_next_hour_is_separate_bucket(self) -> None:
        engine = await _fresh_engine()
        try:
            await _seed(engine, [
                ("r1", "2024-01-01 10:15:00", 5.0),
                ("r2", "2024-01-01 10:45:00", 7.0),
                ("r3", "2024-01-01 11:05:00", 3.0),
            ])
            async with engine.begin() as connection:
                await migrate_timestamp(connection)

            assert await _rollup(engine) == [
                {"device_id": "d1", "hour": datetime(2024, 1, 1, 10), "power": 12.0},
                {"device_id": "d1", "hour": datetime(2024, 1, 1, 11), "power": 3.0},
            ]
        finally:
            await engine.dispose()

    @pytest.mark.asyncio()
    async def test_column_is_native_and_values_round_trip(self) -> None:
        engine = await _fresh_engine()
        try:
            await _seed(engine, [("r1", "2024-01-01 10:15:30", 5.0)])
            async with engine.begin() as connection:
                await migrate_timestamp(connection)

            assert await _column_type(engine) == NATIVE_TIMESTAMP_TYPE
            async with engine.connect() as connection:
                value = await connection.scalar(
                    text("SELECT timestamp FROM power WHERE id = 'r1'"),
                )
                helper = await connection.scalar(text(
                    "SELECT COUNT(*) FROM information_schema.columns "
                    "WHERE table_name = 'power' AND column_name = 't'"
                ))
            assert value == datetime(2024, 1, 1, 10, 15, 30)
            assert helper == 0
        finally:
            await engine.dispose()

    @pytest.mark.asyncio()
    async def test_second_migration_is_noop(self) -> None:
        engine = await _fresh_engine()
        try:
            async with engine.begin() as connection:
                assert await migrate_timestamp(connection) is True
            async with engine.begin() as connection:
                assert await migrate_timestamp(connection) is False
        finally:
            await engine.dispose()

    @pytest.mark.asyncio()
    async def test_unparseable_timestamp_aborts_and_rolls_back(self) -> None:
        engine = await _fresh_engine()
        try:
            await _seed(engine, [
                ("r1", "2024-01-01 10:15:00", 5.0),
                ("r2", "not-a-date", 7.0),
            ])
            with pytest.raises(TimestampParseError):
                async with engine.begin() as connection:
                    await migrate_timestamp(connection)

            assert await _column_type(engine) == TEXT_TYPE
            async with engine.connect() as connection:
                rows = (await connection.execute(
                    text("SELECT id, timestamp FROM power ORDER BY id"),
                )).all()
            assert [tuple(r) for r in rows] == [
                ("r1", "2024-01-01 10:15:00"),
                ("r2", "not-a-date"),
            ]
        finally:
            await engine.dispose()
