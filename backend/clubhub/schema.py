from sqlalchemy import Column, ForeignKey, Integer, String, Table, UniqueConstraint, func
from sqlalchemy.orm import declarative_base  # type: ignore[attr-defined]
from sqlalchemy.sql.sqltypes import BigInteger, Date, DateTime, Enum, Text

Base = declarative_base()
metadata = Base.metadata
DateTimeTZ = DateTime(timezone=True)

admins = Table(
    "admins",
    metadata,
    Column("id", BigInteger, primary_key=True, index=True, autoincrement=True),
    Column("username", String, nullable=False, index=True, unique=True),
    Column("email", String, nullable=True),
    Column("password_hash", String, nullable=False),
    Column("created", DateTimeTZ, nullable=False, server_default=func.now()),
)

clubs = Table(
    "clubs",
    metadata,
    Column("id", BigInteger, primary_key=True, index=True, autoincrement=True),
    Column("name", String, nullable=False, index=True),
    Column("logo", String, nullable=True),
    Column("description", Text, nullable=True),
    Column("created", DateTimeTZ, nullable=False, server_default=func.now()),
    Column("updated", DateTimeTZ, nullable=False, server_default=func.now()),
)

players = Table(
    "players",
    metadata,
    Column("id", BigInteger, primary_key=True, index=True, autoincrement=True),
    Column("name", String, nullable=False, index=True),
    Column("email", String, nullable=True, index=True, unique=True),
    Column("phone", String, nullable=True),
    Column("date_of_birth", Date, nullable=True),
    Column(
        "gender",
        Enum("MALE", "FEMALE", "OTHER", name="gender"),
        nullable=True,
    ),
    Column("place", String, nullable=True),
    Column("state", String, nullable=True),
    Column("district", String, nullable=True),
    Column("photo", String, nullable=True),
    Column("club_id", BigInteger, ForeignKey("clubs.id", ondelete="SET NULL"), index=True, nullable=True),
    Column("created", DateTimeTZ, nullable=False, server_default=func.now()),
    Column("updated", DateTimeTZ, nullable=False, server_default=func.now()),
)

player_roles = Table(
    "player_roles",
    metadata,
    Column("id", BigInteger, primary_key=True, index=True, autoincrement=True),
    Column("player_id", BigInteger, ForeignKey("players.id", ondelete="CASCADE"), index=True, nullable=False),
    Column(
        "role",
        Enum("MANAGER", "MENTOR", "CAPTAIN", "PLAYER", name="player_role"),
        nullable=False,
    ),
    Column("created", DateTimeTZ, nullable=False, server_default=func.now()),
    UniqueConstraint("player_id", "role"),
)

point_system_templates = Table(
    "point_system_templates",
    metadata,
    Column("id", BigInteger, primary_key=True, index=True, autoincrement=True),
    Column("name", String, nullable=False, index=True, unique=True),
    Column("description", Text, nullable=True),
    Column("points_per_win", Integer, nullable=False, server_default="3"),
    Column("points_per_draw", Integer, nullable=False, server_default="1"),
    Column("points_per_loss", Integer, nullable=False, server_default="0"),
    Column("points_per_goal_scored", Integer, nullable=False, server_default="0"),
    Column("points_per_goal_conceded", Integer, nullable=False, server_default="0"),
    Column("points_for_walkover_win", Integer, nullable=False, server_default="3"),
    Column("points_for_walkover_loss", Integer, nullable=False, server_default="-3"),
    Column("points_per_stage_win", Integer, nullable=False, server_default="0"),
    Column("points_per_stage_draw", Integer, nullable=False, server_default="0"),
    Column("points_per_clean_sheet", Integer, nullable=False, server_default="0"),
    Column("created", DateTimeTZ, nullable=False, server_default=func.now()),
    Column("updated", DateTimeTZ, nullable=False, server_default=func.now()),
)

stage_points = Table(
    "stage_points",
    metadata,
    Column("id", BigInteger, primary_key=True, index=True, autoincrement=True),
    Column(
        "template_id",
        BigInteger,
        ForeignKey("point_system_templates.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    ),
    Column("stage_name", String, nullable=False),
    Column("stage_order", Integer, nullable=False, server_default="0"),
    Column("points_per_win", Integer, nullable=False),
    Column("points_per_draw", Integer, nullable=False),
    Column("points_per_loss", Integer, nullable=False),
    Column("points_per_goal_scored", Integer, nullable=False),
    Column("points_per_goal_conceded", Integer, nullable=False),
)

conditional_rules = Table(
    "conditional_rules",
    metadata,
    Column("id", BigInteger, primary_key=True, index=True, autoincrement=True),
    Column(
        "template_id",
        BigInteger,
        ForeignKey("point_system_templates.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    ),
    Column(
        "condition_type",
        Enum(
            "GOALS_SCORED_THRESHOLD",
            "GOALS_CONCEDED_THRESHOLD",
            "GOAL_DIFFERENCE_THRESHOLD",
            "CLEAN_SHEET",
            name="rule_condition_type",
        ),
        nullable=False,
    ),
    Column(
        "operator",
        Enum(
            "EQUALS",
            "GREATER_THAN",
            "LESS_THAN",
            "GREATER_THAN_OR_EQUAL",
            "LESS_THAN_OR_EQUAL",
            name="comparison_operator",
        ),
        nullable=False,
    ),
    Column("threshold", Integer, nullable=False),
    Column("point_adjustment", Integer, nullable=False),
    Column("created", DateTimeTZ, nullable=False, server_default=func.now()),
)

tournaments = Table(
    "tournaments",
    metadata,
    Column("id", BigInteger, primary_key=True, index=True, autoincrement=True),
    Column("name", String, nullable=False, index=True),
    Column("description", Text, nullable=True),
    Column("start_date", DateTimeTZ, nullable=False, index=True),
    Column("end_date", DateTimeTZ, nullable=True),
    Column("club_id", BigInteger, ForeignKey("clubs.id"), index=True, nullable=True),
    Column(
        "point_system_template_id",
        BigInteger,
        ForeignKey("point_system_templates.id"),
        index=True,
        nullable=True,
    ),
    Column("points_per_win", Integer, nullable=False, server_default="3"),
    Column("points_per_draw", Integer, nullable=False, server_default="1"),
    Column("points_per_loss", Integer, nullable=False, server_default="0"),
    Column("points_per_goal_scored", Integer, nullable=False, server_default="0"),
    Column("points_per_goal_conceded", Integer, nullable=False, server_default="0"),
    Column("created", DateTimeTZ, nullable=False, server_default=func.now()),
    Column("updated", DateTimeTZ, nullable=False, server_default=func.now()),
)

tournament_participants = Table(
    "tournament_participants",
    metadata,
    Column("id", BigInteger, primary_key=True, index=True, autoincrement=True),
    Column(
        "tournament_id",
        BigInteger,
        ForeignKey("tournaments.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    ),
    Column("player_id", BigInteger, ForeignKey("players.id"), index=True, nullable=False),
    Column("created", DateTimeTZ, nullable=False, server_default=func.now()),
    UniqueConstraint("tournament_id", "player_id"),
)

matches = Table(
    "matches",
    metadata,
    Column("id", BigInteger, primary_key=True, index=True, autoincrement=True),
    Column(
        "tournament_id",
        BigInteger,
        ForeignKey("tournaments.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    ),
    Column("match_date", DateTimeTZ, nullable=False, index=True),
    Column("stage_id", BigInteger, ForeignKey("stage_points.id"), nullable=True),
    Column("stage_name", String, nullable=True),
    Column("created", DateTimeTZ, nullable=False, server_default=func.now()),
    Column("updated", DateTimeTZ, nullable=False, server_default=func.now()),
)

match_results = Table(
    "match_results",
    metadata,
    Column("id", BigInteger, primary_key=True, index=True, autoincrement=True),
    Column("match_id", BigInteger, ForeignKey("matches.id", ondelete="CASCADE"), index=True, nullable=False),
    Column("player_id", BigInteger, ForeignKey("players.id"), index=True, nullable=False),
    Column("outcome", Enum("WIN", "DRAW", "LOSS", name="match_outcome"), nullable=False),
    Column("goals_scored", Integer, nullable=False, server_default="0"),
    Column("goals_conceded", Integer, nullable=False, server_default="0"),
    Column("base_points", Integer, nullable=False, server_default="0"),
    Column("conditional_points", Integer, nullable=False, server_default="0"),
    Column("points_earned", Integer, nullable=False, server_default="0"),
    Column("created", DateTimeTZ, nullable=False, server_default=func.now()),
    UniqueConstraint("match_id", "player_id"),
)

tournament_player_stats = Table(
    "tournament_player_stats",
    metadata,
    Column("id", BigInteger, primary_key=True, index=True, autoincrement=True),
    Column(
        "tournament_id",
        BigInteger,
        ForeignKey("tournaments.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    ),
    Column("player_id", BigInteger, ForeignKey("players.id", ondelete="CASCADE"), index=True, nullable=False),
    Column("matches_played", Integer, nullable=False, server_default="0"),
    Column("wins", Integer, nullable=False, server_default="0"),
    Column("draws", Integer, nullable=False, server_default="0"),
    Column("losses", Integer, nullable=False, server_default="0"),
    Column("goals_scored", Integer, nullable=False, server_default="0"),
    Column("goals_conceded", Integer, nullable=False, server_default="0"),
    Column("total_points", Integer, nullable=False, server_default="0"),
    Column("conditional_points", Integer, nullable=False, server_default="0"),
    Column("updated", DateTimeTZ, nullable=False, server_default=func.now()),
    UniqueConstraint("tournament_id", "player_id"),
)

player_transfers = Table(
    "player_transfers",
    metadata,
    Column("id", BigInteger, primary_key=True, index=True, autoincrement=True),
    Column("player_id", BigInteger, ForeignKey("players.id", ondelete="CASCADE"), index=True, nullable=False),
    Column("from_club_id", BigInteger, ForeignKey("clubs.id", ondelete="SET NULL"), nullable=True),
    Column("to_club_id", BigInteger, ForeignKey("clubs.id", ondelete="SET NULL"), nullable=True),
    Column("transfer_date", DateTimeTZ, nullable=False, index=True),
    Column("notes", Text, nullable=True),
)

player_club_stats = Table(
    "player_club_stats",
    metadata,
    Column("id", BigInteger, primary_key=True, index=True, autoincrement=True),
    Column("player_id", BigInteger, ForeignKey("players.id", ondelete="CASCADE"), index=True, nullable=False),
    Column("club_id", BigInteger, ForeignKey("clubs.id", ondelete="SET NULL"), index=True, nullable=True),
    Column("joined_at", DateTimeTZ, nullable=False),
    Column("left_at", DateTimeTZ, nullable=True),
)
