"""
Convert power.timestamp from TEXT to a native TIMESTAMP.

Uses a helper column so every row is parsed before the column type changes.
A value that does not parse as a timestamp aborts the UPDATE, and with it
the whole revision, before the ALTER COLUMN is reached.

Revision ID: 002
Revises: 001
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
revision: str = "002"
down_revision: Union[str, None] = "001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Backfill a TIMESTAMP helper column, then swap the column type.

    Steps:
        1. Add nullable helper column t TIMESTAMP.
        2. Backfill t by casting the text timestamp.
        3. Change timestamp to TIMESTAMP using t.
        4. Drop t.
    """
    op.add_column("power", sa.Column("t", sa.DateTime(), nullable=True))

    op.execute("UPDATE power SET t = timestamp::TIMESTAMP")

    op.alter_column(
        "power",
        "timestamp",
        existing_type=sa.Text(),
        type_=sa.DateTime(),
        existing_nullable=False,
        postgresql_using="t",
    )

    op.drop_column("power", "t")


def downgrade() -> None:
    """Cast power.timestamp back to TEXT."""
    op.alter_column(
        "power",
        "timestamp",
        existing_type=sa.DateTime(),
        type_=sa.Text(),
        existing_nullable=False,
        postgresql_using="timestamp::TEXT",
    )
