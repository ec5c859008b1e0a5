"""add player transfer history

Revision ID: 8b2f6d4e1c57
Revises: 4a7c1e2b9d30
Create Date: 2026-09-08 00:00:00.000000

"""

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str | None = "8b2f6d4e1c57"
down_revision: str | None = "4a7c1e2b9d30"
branch_labels: str | None = None
depends_on: str | None = None


def upgrade() -> None:
    op.create_table(
        "player_transfers",
        sa.Column("id", sa.BigInteger(), autoincrement=True, nullable=False),
        sa.Column("player_id", sa.BigInteger(), nullable=False),
        sa.Column("from_club_id", sa.BigInteger(), nullable=True),
        sa.Column("to_club_id", sa.BigInteger(), nullable=True),
        sa.Column("transfer_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.ForeignKeyConstraint(["player_id"], ["players.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["from_club_id"], ["clubs.id"], ondelete="SET NULL"),
        sa.ForeignKeyConstraint(["to_club_id"], ["clubs.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_player_transfers_id"), "player_transfers", ["id"], unique=False)
    op.create_index(
        op.f("ix_player_transfers_player_id"), "player_transfers", ["player_id"], unique=False
    )
    op.create_index(
        op.f("ix_player_transfers_transfer_date"),
        "player_transfers",
        ["transfer_date"],
        unique=False,
    )

    op.create_table(
        "player_club_stats",
        sa.Column("id", sa.BigInteger(), autoincrement=True, nullable=False),
        sa.Column("player_id", sa.BigInteger(), nullable=False),
        sa.Column("club_id", sa.BigInteger(), nullable=True),
        sa.Column("joined_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("left_at", sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(["player_id"], ["players.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["club_id"], ["clubs.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_player_club_stats_id"), "player_club_stats", ["id"], unique=False)
    op.create_index(
        op.f("ix_player_club_stats_player_id"), "player_club_stats", ["player_id"], unique=False
    )
    op.create_index(
        op.f("ix_player_club_stats_club_id"), "player_club_stats", ["club_id"], unique=False
    )

    # Players that already belong to a club get an open membership period.
    op.execute(
        """
        INSERT INTO player_club_stats (player_id, club_id, joined_at)
        SELECT id, club_id, created
        FROM players
        """
    )


def downgrade() -> None:
    op.drop_table("player_club_stats")
    op.drop_table("player_transfers")
