from heliclockter import datetime_utc
from pydantic import BaseModel

from clubhub.models.db.shared import BaseModelORM
from clubhub.utils.id_types import PlayerId, TournamentId, TournamentPlayerStatsId


class PlayerStatsTotals(BaseModel):
    matches_played: int = 0
    wins: int = 0
    draws: int = 0
    losses: int = 0
    goals_scored: int = 0
    goals_conceded: int = 0
    total_points: int = 0
    conditional_points: int = 0

    @property
    def goal_difference(self) -> int:
        return self.goals_scored - self.goals_conceded


class TournamentPlayerStatsInsertable(PlayerStatsTotals, BaseModelORM):
    tournament_id: TournamentId
    player_id: PlayerId
    updated: datetime_utc


class TournamentPlayerStats(TournamentPlayerStatsInsertable):
    id: TournamentPlayerStatsId


class TournamentPlayerStatsWithPlayer(TournamentPlayerStats):
    player_name: str
    player_photo: str | None = None
    club_name: str | None = None


class PlayerTournamentStats(TournamentPlayerStats):
    tournament_name: str


class RecalculationSummary(BaseModel):
    tournament_id: TournamentId
    participants: int
    matches: int
    results_updated: int
    duration_ms: int
