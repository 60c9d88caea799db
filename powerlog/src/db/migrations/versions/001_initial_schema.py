"""
Initial schema: create devices and power tables.

Creates the devices reference table and the power readings table in the
original layout, where power.timestamp is TEXT. Revision 002 converts that
column to a native TIMESTAMP.

Revision ID: 001
Revises: None
Create Date: 2026-10-16

CHANGELOG:
- 2026-10-16: Initial creation

TODO:
- None
"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

# Revision identifiers used by Alembic.
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create devices, then power (power references devices)."""
    op.create_table(
        "devices",
        sa.Column("id", sa.Text(), nullable=False),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("ipv6", sa.Text(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "power",
        sa.Column("id", sa.Text(), nullable=False),
        sa.Column("device_id", sa.Text(), nullable=False),
        sa.Column("timestamp", sa.Text(), nullable=False),
        sa.Column("power", sa.Double(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["device_id"], ["devices.id"]),
    )


def downgrade() -> None:
    """Drop power before devices."""
    op.drop_table("power")
    op.drop_table("devices")
