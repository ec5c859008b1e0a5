from heliclockter import datetime_utc
from pydantic import BaseModel

from clubhub.models.db.club import Club, ClubWithCounts
from clubhub.models.db.match import MatchOutcome
from clubhub.models.db.player import PlayerWithClub
from clubhub.models.db.point_system import StagePoint
from clubhub.models.db.stats import PlayerTournamentStats
from clubhub.models.db.tournament import TournamentStatus, TournamentWithCounts
from clubhub.utils.id_types import ClubId, MatchId, PlayerId, TournamentId


class PlayerLeaderboardRow(BaseModel):
    rank: int = 0
    player_id: PlayerId
    player_name: str
    player_photo: str | None = None
    club_id: ClubId | None = None
    club_name: str | None = None
    matches_played: int
    wins: int
    draws: int
    losses: int
    goals_scored: int
    goals_conceded: int
    goal_difference: int
    total_points: int
    conditional_points: int = 0
    win_rate: float


class TeamLeaderboardRow(BaseModel):
    rank: int = 0
    club_id: ClubId
    club_name: str
    club_logo: str | None = None
    player_count: int
    matches_played: int
    wins: int
    draws: int
    losses: int
    goals_scored: int
    goals_conceded: int
    goal_difference: int
    total_points: int
    win_rate: float


class ClubHierarchy(BaseModel):
    club: Club
    managers: list[PlayerWithClub]
    mentors: list[PlayerWithClub]
    captains: list[PlayerWithClub]
    players: list[PlayerWithClub]


class RecentResult(BaseModel):
    match_id: MatchId
    tournament_id: TournamentId
    tournament_name: str
    match_date: datetime_utc
    outcome: MatchOutcome
    goals_scored: int
    goals_conceded: int
    points_earned: int


class PublicPlayerDetail(BaseModel):
    player: PlayerWithClub
    tournament_stats: list[PlayerTournamentStats]
    recent_results: list[RecentResult]


class PublicTournament(TournamentWithCounts):
    status: TournamentStatus


class PublicTournamentDetail(BaseModel):
    tournament: PublicTournament
    stages: list[StagePoint]


class PublicClubDetail(BaseModel):
    club: Club
    players: list[PlayerWithClub]
    tournaments: list[TournamentWithCounts]


class SearchResults(BaseModel):
    clubs: list[ClubWithCounts]
    players: list[PlayerWithClub]
