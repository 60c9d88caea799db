"""
Hourly power rollup per device.

Sums ``power`` per ``(device_id, hour)`` where the hour is the reading's
timestamp truncated with ``date_trunc('hour', ...)``. Only hours with at
least one reading produce a row; there is no zero-fill.

Requires ``power.timestamp`` to be a native TIMESTAMP (see
:mod:`powerlog.src.services.timestamp_migration`).

CHANGELOG:
- 2026-10-16: Add optional device_id filter
- 2026-10-16: Initial creation

TODO:
- None
"""

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

HOUR_EXPR = "date_trunc('hour', timestamp)"


async def get_hourly_power(
    session: AsyncSession,
    device_id: str | None = None,
) -> list[dict]:
    """Query the hourly power sum per device.

    Args:
        session: Async SQLAlchemy session for database operations.
        device_id: Optional device to restrict the rollup to.

    Returns:
        List of dicts with ``device_id``, ``hour`` (naive datetime at the
        start of the hour) and ``power`` (sum in watts), ordered by
        device_id then hour.
    """
    params: dict = {}
    sql = (
        f"SELECT device_id, {HOUR_EXPR} AS hour, SUM(power) AS power "
        "FROM power"
    )
    if device_id is not None:
        sql += " WHERE device_id = :device_id"
        params["device_id"] = device_id
    sql += f" GROUP BY device_id, {HOUR_EXPR} ORDER BY device_id, hour"

    result = await session.execute(text(sql), params)
    rows = result.fetchall()

    return [
        {
            "device_id": row._mapping["device_id"],
            "hour": row._mapping["hour"],
            "power": row._mapping["power"],
        }
        for row in rows
    ]
