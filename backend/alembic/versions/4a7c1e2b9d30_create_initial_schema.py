"""create initial schema

Revision ID: 4a7c1e2b9d30
Revises:
Create Date: 2026-09-01 00:00:00.000000

"""

import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import ENUM

from alembic import op

# revision identifiers, used by Alembic.
revision: str | None = "4a7c1e2b9d30"
down_revision: str | None = None
branch_labels: str | None = None
depends_on: str | None = None

gender_enum = ENUM("MALE", "FEMALE", "OTHER", name="gender", create_type=False)
player_role_enum = ENUM(
    "MANAGER", "MENTOR", "CAPTAIN", "PLAYER", name="player_role", create_type=False
)
rule_condition_type_enum = ENUM(
    "GOALS_SCORED_THRESHOLD",
    "GOALS_CONCEDED_THRESHOLD",
    "GOAL_DIFFERENCE_THRESHOLD",
    "CLEAN_SHEET",
    name="rule_condition_type",
    create_type=False,
)
comparison_operator_enum = ENUM(
    "EQUALS",
    "GREATER_THAN",
    "LESS_THAN",
    "GREATER_THAN_OR_EQUAL",
    "LESS_THAN_OR_EQUAL",
    name="comparison_operator",
    create_type=False,
)
match_outcome_enum = ENUM("WIN", "DRAW", "LOSS", name="match_outcome", create_type=False)

ENUMS = (
    gender_enum,
    player_role_enum,
    rule_condition_type_enum,
    comparison_operator_enum,
    match_outcome_enum,
)


def created_column(name: str = "created") -> sa.Column:  # type: ignore[type-arg]
    return sa.Column(
        name, sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False
    )


def coefficient_columns(with_defaults: bool) -> list[sa.Column]:  # type: ignore[type-arg]
    defaults = {
        "points_per_win": "3",
        "points_per_draw": "1",
        "points_per_loss": "0",
        "points_per_goal_scored": "0",
        "points_per_goal_conceded": "0",
    }
    return [
        sa.Column(
            name, sa.Integer(), server_default=default if with_defaults else None, nullable=False
        )
        for name, default in defaults.items()
    ]


def upgrade() -> None:
    for enum in ENUMS:
        enum.create(op.get_bind(), checkfirst=True)

    op.create_table(
        "admins",
        sa.Column("id", sa.BigInteger(), autoincrement=True, nullable=False),
        sa.Column("username", sa.String(), nullable=False),
        sa.Column("email", sa.String(), nullable=True),
        sa.Column("password_hash", sa.String(), nullable=False),
        created_column(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_admins_id"), "admins", ["id"], unique=False)
    op.create_index(op.f("ix_admins_username"), "admins", ["username"], unique=True)

    op.create_table(
        "clubs",
        sa.Column("id", sa.BigInteger(), autoincrement=True, nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("logo", sa.String(), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        created_column(),
        created_column("updated"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_clubs_id"), "clubs", ["id"], unique=False)
    op.create_index(op.f("ix_clubs_name"), "clubs", ["name"], unique=False)

    op.create_table(
        "players",
        sa.Column("id", sa.BigInteger(), autoincrement=True, nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("email", sa.String(), nullable=True),
        sa.Column("phone", sa.String(), nullable=True),
        sa.Column("date_of_birth", sa.Date(), nullable=True),
        sa.Column("gender", gender_enum, nullable=True),
        sa.Column("place", sa.String(), nullable=True),
        sa.Column("state", sa.String(), nullable=True),
        sa.Column("district", sa.String(), nullable=True),
        sa.Column("photo", sa.String(), nullable=True),
        sa.Column("club_id", sa.BigInteger(), nullable=True),
        created_column(),
        created_column("updated"),
        sa.ForeignKeyConstraint(["club_id"], ["clubs.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_players_id"), "players", ["id"], unique=False)
    op.create_index(op.f("ix_players_name"), "players", ["name"], unique=False)
    op.create_index(op.f("ix_players_email"), "players", ["email"], unique=True)
    op.create_index(op.f("ix_players_club_id"), "players", ["club_id"], unique=False)

    op.create_table(
        "player_roles",
        sa.Column("id", sa.BigInteger(), autoincrement=True, nullable=False),
        sa.Column("player_id", sa.BigInteger(), nullable=False),
        sa.Column("role", player_role_enum, nullable=False),
        created_column(),
        sa.ForeignKeyConstraint(["player_id"], ["players.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("player_id", "role"),
    )
    op.create_index(op.f("ix_player_roles_id"), "player_roles", ["id"], unique=False)
    op.create_index(op.f("ix_player_roles_player_id"), "player_roles", ["player_id"], unique=False)

    op.create_table(
        "point_system_templates",
        sa.Column("id", sa.BigInteger(), autoincrement=True, nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        *coefficient_columns(with_defaults=True),
        sa.Column("points_for_walkover_win", sa.Integer(), server_default="3", nullable=False),
        sa.Column("points_for_walkover_loss", sa.Integer(), server_default="-3", nullable=False),
        sa.Column("points_per_stage_win", sa.Integer(), server_default="0", nullable=False),
        sa.Column("points_per_stage_draw", sa.Integer(), server_default="0", nullable=False),
        sa.Column("points_per_clean_sheet", sa.Integer(), server_default="0", nullable=False),
        created_column(),
        created_column("updated"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        op.f("ix_point_system_templates_id"), "point_system_templates", ["id"], unique=False
    )
    op.create_index(
        op.f("ix_point_system_templates_name"), "point_system_templates", ["name"], unique=True
    )

    op.create_table(
        "stage_points",
        sa.Column("id", sa.BigInteger(), autoincrement=True, nullable=False),
        sa.Column("template_id", sa.BigInteger(), nullable=False),
        sa.Column("stage_name", sa.String(), nullable=False),
        sa.Column("stage_order", sa.Integer(), server_default="0", nullable=False),
        *coefficient_columns(with_defaults=False),
        sa.ForeignKeyConstraint(
            ["template_id"], ["point_system_templates.id"], ondelete="CASCADE"
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_stage_points_id"), "stage_points", ["id"], unique=False)
    op.create_index(
        op.f("ix_stage_points_template_id"), "stage_points", ["template_id"], unique=False
    )

    op.create_table(
        "conditional_rules",
        sa.Column("id", sa.BigInteger(), autoincrement=True, nullable=False),
        sa.Column("template_id", sa.BigInteger(), nullable=False),
        sa.Column("condition_type", rule_condition_type_enum, nullable=False),
        sa.Column("operator", comparison_operator_enum, nullable=False),
        sa.Column("threshold", sa.Integer(), nullable=False),
        sa.Column("point_adjustment", sa.Integer(), nullable=False),
        created_column(),
        sa.ForeignKeyConstraint(
            ["template_id"], ["point_system_templates.id"], ondelete="CASCADE"
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_conditional_rules_id"), "conditional_rules", ["id"], unique=False)
    op.create_index(
        op.f("ix_conditional_rules_template_id"), "conditional_rules", ["template_id"], unique=False
    )

    op.create_table(
        "tournaments",
        sa.Column("id", sa.BigInteger(), autoincrement=True, nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("start_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("end_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("club_id", sa.BigInteger(), nullable=True),
        sa.Column("point_system_template_id", sa.BigInteger(), nullable=True),
        *coefficient_columns(with_defaults=True),
        created_column(),
        created_column("updated"),
        sa.ForeignKeyConstraint(["club_id"], ["clubs.id"]),
        sa.ForeignKeyConstraint(["point_system_template_id"], ["point_system_templates.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_tournaments_id"), "tournaments", ["id"], unique=False)
    op.create_index(op.f("ix_tournaments_name"), "tournaments", ["name"], unique=False)
    op.create_index(op.f("ix_tournaments_start_date"), "tournaments", ["start_date"], unique=False)
    op.create_index(op.f("ix_tournaments_club_id"), "tournaments", ["club_id"], unique=False)
    op.create_index(
        op.f("ix_tournaments_point_system_template_id"),
        "tournaments",
        ["point_system_template_id"],
        unique=False,
    )

    op.create_table(
        "tournament_participants",
        sa.Column("id", sa.BigInteger(), autoincrement=True, nullable=False),
        sa.Column("tournament_id", sa.BigInteger(), nullable=False),
        sa.Column("player_id", sa.BigInteger(), nullable=False),
        created_column(),
        sa.ForeignKeyConstraint(["tournament_id"], ["tournaments.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["player_id"], ["players.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("tournament_id", "player_id"),
    )
    op.create_index(
        op.f("ix_tournament_participants_id"), "tournament_participants", ["id"], unique=False
    )
    op.create_index(
        op.f("ix_tournament_participants_tournament_id"),
        "tournament_participants",
        ["tournament_id"],
        unique=False,
    )
    op.create_index(
        op.f("ix_tournament_participants_player_id"),
        "tournament_participants",
        ["player_id"],
        unique=False,
    )

    op.create_table(
        "matches",
        sa.Column("id", sa.BigInteger(), autoincrement=True, nullable=False),
        sa.Column("tournament_id", sa.BigInteger(), nullable=False),
        sa.Column("match_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("stage_id", sa.BigInteger(), nullable=True),
        sa.Column("stage_name", sa.String(), nullable=True),
        created_column(),
        created_column("updated"),
        sa.ForeignKeyConstraint(["tournament_id"], ["tournaments.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["stage_id"], ["stage_points.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_matches_id"), "matches", ["id"], unique=False)
    op.create_index(op.f("ix_matches_tournament_id"), "matches", ["tournament_id"], unique=False)
    op.create_index(op.f("ix_matches_match_date"), "matches", ["match_date"], unique=False)

    op.create_table(
        "match_results",
        sa.Column("id", sa.BigInteger(), autoincrement=True, nullable=False),
        sa.Column("match_id", sa.BigInteger(), nullable=False),
        sa.Column("player_id", sa.BigInteger(), nullable=False),
        sa.Column("outcome", match_outcome_enum, nullable=False),
        sa.Column("goals_scored", sa.Integer(), server_default="0", nullable=False),
        sa.Column("goals_conceded", sa.Integer(), server_default="0", nullable=False),
        sa.Column("base_points", sa.Integer(), server_default="0", nullable=False),
        sa.Column("conditional_points", sa.Integer(), server_default="0", nullable=False),
        sa.Column("points_earned", sa.Integer(), server_default="0", nullable=False),
        created_column(),
        sa.ForeignKeyConstraint(["match_id"], ["matches.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["player_id"], ["players.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("match_id", "player_id"),
    )
    op.create_index(op.f("ix_match_results_id"), "match_results", ["id"], unique=False)
    op.create_index(op.f("ix_match_results_match_id"), "match_results", ["match_id"], unique=False)
    op.create_index(
        op.f("ix_match_results_player_id"), "match_results", ["player_id"], unique=False
    )

    op.create_table(
        "tournament_player_stats",
        sa.Column("id", sa.BigInteger(), autoincrement=True, nullable=False),
        sa.Column("tournament_id", sa.BigInteger(), nullable=False),
        sa.Column("player_id", sa.BigInteger(), nullable=False),
        sa.Column("matches_played", sa.Integer(), server_default="0", nullable=False),
        sa.Column("wins", sa.Integer(), server_default="0", nullable=False),
        sa.Column("draws", sa.Integer(), server_default="0", nullable=False),
        sa.Column("losses", sa.Integer(), server_default="0", nullable=False),
        sa.Column("goals_scored", sa.Integer(), server_default="0", nullable=False),
        sa.Column("goals_conceded", sa.Integer(), server_default="0", nullable=False),
        sa.Column("total_points", sa.Integer(), server_default="0", nullable=False),
        sa.Column("conditional_points", sa.Integer(), server_default="0", nullable=False),
        created_column("updated"),
        sa.ForeignKeyConstraint(["tournament_id"], ["tournaments.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["player_id"], ["players.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("tournament_id", "player_id"),
    )
    op.create_index(
        op.f("ix_tournament_player_stats_id"), "tournament_player_stats", ["id"], unique=False
    )
    op.create_index(
        op.f("ix_tournament_player_stats_tournament_id"),
        "tournament_player_stats",
        ["tournament_id"],
        unique=False,
    )
    op.create_index(
        op.f("ix_tournament_player_stats_player_id"),
        "tournament_player_stats",
        ["player_id"],
        unique=False,
    )


def downgrade() -> None:
    for table in (
        "tournament_player_stats",
        "match_results",
        "matches",
        "tournament_participants",
        "tournaments",
        "conditional_rules",
        "stage_points",
        "point_system_templates",
        "player_roles",
        "players",
        "clubs",
        "admins",
    ):
        op.drop_table(table)

    for enum in reversed(ENUMS):
        enum.drop(op.get_bind(), checkfirst=True)
