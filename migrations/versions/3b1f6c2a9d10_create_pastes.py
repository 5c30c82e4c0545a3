"""create pastes

Revision ID: 3b1f6c2a9d10
Revises:
Create Date: 2026-10-19 12:00:00.000000

"""
from __future__ import annotations

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "3b1f6c2a9d10"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create the pastes table and its expiry index."""
    op.create_table(
        "pastes",
        sa.Column("id", sa.String(length=64), nullable=False),
        sa.Column("encrypted_content", sa.Text(), nullable=False),
        sa.Column("sender_name", sa.Text(), nullable=True),
        sa.Column("password_hash", sa.String(length=64), nullable=True),
        sa.Column("content_type", sa.String(length=16), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_pastes_expires_at", "pastes", ["expires_at"])


def downgrade() -> None:
    """Drop the pastes table."""
    op.drop_index("ix_pastes_expires_at", table_name="pastes")
    op.drop_table("pastes")
