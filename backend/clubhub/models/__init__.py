"""Model registration module used by alembic autogeneration."""

from clubhub.models.db.admin import AdminInDB  # noqa: F401
from clubhub.models.db.club import Club  # noqa: F401
from clubhub.models.db.match import Match, MatchResult  # noqa: F401
from clubhub.models.db.player import Player  # noqa: F401
from clubhub.models.db.point_system import (  # noqa: F401
    ConditionalRule,
    PointSystemTemplate,
    StagePoint,
)
from clubhub.models.db.stats import TournamentPlayerStats  # noqa: F401
from clubhub.models.db.tournament import Tournament  # noqa: F401
from clubhub.models.db.transfer import PlayerClubStats, PlayerTransfer  # noqa: F401
