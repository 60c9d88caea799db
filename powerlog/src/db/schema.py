"""
Destructive schema reset for the devices and power tables.

Drops ``power`` then ``devices`` and recreates both in their pre-migration
layout, where ``power.timestamp`` is free-form TEXT. Running the reset twice
always yields the same two empty tables; every existing row is discarded.

The ordering follows the foreign key from ``power.device_id`` to
``devices.id``: the dependent table is dropped first and created last.

CHANGELOG:
- 2026-10-16: Initial creation

TODO:
- None
"""

import logging

from sqlalchemy import Column, Double, ForeignKey, MetaData, Table, Text
from sqlalchemy.ext.asyncio import AsyncConnection
from sqlalchemy.schema import CreateTable, DDLElement, DropTable

from powerlog.src.db.models import Device

logger = logging.getLogger(__name__)

# Pre-migration layout. devices is identical to the ORM table; power keeps
# its timestamp as TEXT until migrate_timestamp() converts it.
initial_metadata = MetaData()

devices_table: Table = Device.__table__.to_metadata(initial_metadata)

power_table = Table(
    "power",
    initial_metadata,
    Column("id", Text, primary_key=True),
    Column("device_id", Text, ForeignKey("devices.id"), nullable=False),
    Column("timestamp", Text, nullable=False),
    Column("power", Double, nullable=False),
)


def reset_statements() -> list[DDLElement]:
    """Return the reset DDL in execution order.

    Returns:
        list: DROP power, DROP devices, CREATE devices, CREATE power.
    """
    return [
        DropTable(power_table, if_exists=True),
        DropTable(devices_table, if_exists=True),
        CreateTable(devices_table),
        CreateTable(power_table),
    ]


async def reset_schema(connection: AsyncConnection) -> None:
    """Drop and recreate the devices and power tables.

    Run this inside a transaction (``engine.begin()``) so a failure part way
    through leaves the previous tables untouched.

    Args:
        connection: Async connection with an open transaction.
    """
    logger.warning("Resetting schema: all devices and power rows are discarded")
    for statement in reset_statements():
        logger.info(
            "Schema reset: %s %s",
            type(statement).__name__,
            statement.element.name,
        )
        await connection.execute(statement)
    logger.info("Schema reset complete")
