"""
Hourly rollup export: one CSV object per device uploaded to S3.

Fetches the hourly power rollup, groups it per device and uploads each
device's rows as ``hour,power`` CSV under a key stamped with the export
time, e.g. ``2026-10-16T21:05 d1.txt``.

CHANGELOG:
- 2026-10-16: Initial creation

TODO:
- None
"""

import csv
import io
import logging
from collections.abc import Iterable
from datetime import UTC, datetime

from sqlalchemy.ext.asyncio import AsyncSession

from powerlog.src.services.aggregation import get_hourly_power
from powerlog.src.storage.s3_client import upload_bytes

logger = logging.getLogger(__name__)

CSV_HEADER = ("hour", "power")
HOUR_FORMAT = "%Y-%m-%dT%H:%M:%S"
FILENAME_TIME_FORMAT = "%Y-%m-%dT%H:%M"


def group_by_device(rows: Iterable[dict]) -> dict[str, list[dict]]:
    """Group rollup rows by device_id, keeping the input order within a group."""
    grouped: dict[str, list[dict]] = {}
    for row in rows:
        grouped.setdefault(row["device_id"], []).append(row)
    return grouped


def render_csv(rows: Iterable[dict]) -> bytes:
    """Render rollup rows for one device as UTF-8 CSV.

    Args:
        rows: Rollup rows with ``hour`` and ``power`` keys.

    Returns:
        CSV bytes with a ``hour,power`` header line.
    """
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(CSV_HEADER)
    for row in rows:
        writer.writerow((row["hour"].strftime(HOUR_FORMAT), row["power"]))
    return buffer.getvalue().encode("utf-8")


def export_filename(device_id: str, now: datetime | None = None) -> str:
    """Build the object key for a device export.

    Args:
        device_id: Device the file belongs to.
        now: Export time. Defaults to the current UTC time.

    Returns:
        Key of the form ``"<YYYY-MM-DDTHH:MM> <device_id>.txt"``.
    """
    if now is None:
        now = datetime.now(UTC)
    return f"{now.strftime(FILENAME_TIME_FORMAT)} {device_id}.txt"


async def export_hourly_power(
    session: AsyncSession,
    client,
    bucket: str,
    now: datetime | None = None,
) -> list[str]:
    """Upload the hourly rollup to S3, one object per device.

    Devices without readings have no rollup rows and get no object.

    Args:
        session: Async SQLAlchemy session for database operations.
        client: boto3 S3 client.
        bucket: Target bucket.
        now: Export time used in every key. Defaults to the current UTC time.

    Returns:
        Keys of the uploaded objects.
    """
    if now is None:
        now = datetime.now(UTC)

    rows = await get_hourly_power(session)
    grouped = group_by_device(rows)
    logger.info(
        "Exporting %d rollup rows for %d devices to bucket %s",
        len(rows),
        len(grouped),
        bucket,
    )

    keys: list[str] = []
    for device_id, device_rows in grouped.items():
        key = export_filename(device_id, now)
        upload_bytes(client, bucket, key, render_csv(device_rows))
        keys.append(key)
    return keys
