"""simulations table

Revision ID: 20261019_01_simulations
Revises:
Create Date: 2026-10-19

"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "20261019_01_simulations"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "simulations",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("user_id", sa.String(length=64), nullable=False),
        sa.Column("title", sa.Text(), nullable=True),
        sa.Column("input_data", sa.JSON(), nullable=False),
        sa.Column("ai_result", sa.JSON(), nullable=False),
        sa.Column(
            "is_public",
            sa.Boolean(),
            server_default=sa.text("false"),
            nullable=True,
        ),
        sa.Column("tags", sa.JSON(), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
    )
    op.create_index("ix_simulations_user_id", "simulations", ["user_id"], unique=False)
    op.create_index(
        "ix_simulations_is_public", "simulations", ["is_public"], unique=False
    )


def downgrade() -> None:
    op.drop_index("ix_simulations_is_public", table_name="simulations")
    op.drop_index("ix_simulations_user_id", table_name="simulations")
    op.drop_table("simulations")
