"""
powerlog command-line entry point.

Commands:

- ``reset --yes``: drop and recreate the devices and power tables (all rows
  are discarded).
- ``migrate``: convert ``power.timestamp`` from TEXT to TIMESTAMP.
- ``rollup [--device-id ID]``: print the hourly power sum per device as CSV.
- ``export``: upload the hourly rollup to S3, one object per device.

Each command runs once against ``DATABASE_URL`` and exits. The process exit
code is the return value of :func:`main`.

CHANGELOG:
- 2026-10-16: Add export command
- 2026-10-16: Initial creation

TODO:
- None
"""

import argparse
import asyncio
import csv
import logging
import sys
from typing import TextIO

from powerlog.src.config import Settings, get_settings
from powerlog.src.db.schema import reset_schema
from powerlog.src.db.session import dispose_engine, get_async_session, init_engine
from powerlog.src.logging_config import setup_logging
from powerlog.src.services.aggregation import get_hourly_power
from powerlog.src.services.export import export_hourly_power
from powerlog.src.services.timestamp_migration import (
    TimestampMigrationError,
    migrate_timestamp,
)
from powerlog.src.storage.s3_client import get_s3_client, list_keys

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_USAGE = 2


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for all commands."""
    parser = argparse.ArgumentParser(
        prog="powerlog",
        description="Device power telemetry schema, migration and hourly rollup.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    reset = subparsers.add_parser(
        "reset", help="Drop and recreate the devices and power tables",
    )
    reset.add_argument(
        "--yes",
        action="store_true",
        help="Confirm that every existing device and reading is deleted",
    )

    subparsers.add_parser(
        "migrate", help="Convert power.timestamp from TEXT to TIMESTAMP",
    )

    rollup = subparsers.add_parser(
        "rollup", help="Print the hourly power sum per device as CSV",
    )
    rollup.add_argument("--device-id", help="Only include this device")

    subparsers.add_parser(
        "export", help="Upload the hourly rollup to S3, one file per device",
    )
    return parser


async def _reset() -> None:
    engine = init_engine()
    async with engine.begin() as connection:
        await reset_schema(connection)


async def _migrate() -> bool:
    engine = init_engine()
    async with engine.begin() as connection:
        return await migrate_timestamp(connection)


async def _rollup(device_id: str | None, out: TextIO) -> int:
    async with get_async_session() as session:
        rows = await get_hourly_power(session, device_id=device_id)

    writer = csv.writer(out, lineterminator="\n")
    writer.writerow(("device_id", "hour", "power"))
    for row in rows:
        writer.writerow((row["device_id"], str(row["hour"]), row["power"]))
    return len(rows)


async def _export(settings: Settings) -> list[str]:
    client = get_s3_client(settings)
    async with get_async_session() as session:
        keys = await export_hourly_power(session, client, settings.S3_BUCKET)

    for key in list_keys(client, settings.S3_BUCKET):
        logger.info("Found in bucket %s: %s", settings.S3_BUCKET, key)
    return keys


async def _run(args: argparse.Namespace, settings: Settings) -> int:
    """Dispatch *args* to its command and dispose the engine afterwards."""
    try:
        if args.command == "reset":
            await _reset()
        elif args.command == "migrate":
            try:
                await _migrate()
            except TimestampMigrationError:
                logger.exception("Timestamp migration aborted, transaction rolled back")
                return EXIT_FAILED
        elif args.command == "rollup":
            count = await _rollup(args.device_id, sys.stdout)
            logger.info("Rollup returned %d rows", count)
        elif args.command == "export":
            keys = await _export(settings)
            logger.info("Export uploaded %d files", len(keys))
    finally:
        await dispose_engine()
    return EXIT_OK


def main(argv: list[str] | None = None) -> int:
    """Parse *argv*, configure logging and run the selected command.

    Args:
        argv: Command-line arguments without the program name. Defaults to
            ``sys.argv[1:]``.

    Returns:
        Process exit code.
    """
    args = build_parser().parse_args(argv)
    settings = get_settings()
    setup_logging(settings.log_level)

    if args.command == "reset" and not args.yes:
        logger.error("reset deletes all devices and power readings; pass --yes to confirm")
        return EXIT_USAGE

    return asyncio.run(_run(args, settings))


def run() -> None:
    """Console script entry point."""
    sys.exit(main())


if __name__ == "__main__":
    run()
