from collections.abc import Callable, Iterable, Mapping
from typing import Any, Protocol, TypeVar

from clubhub.models.db.stats import TournamentPlayerStatsWithPlayer
from clubhub.models.leaderboard import PlayerLeaderboardRow, TeamLeaderboardRow
from clubhub.sql.leaderboard import get_club_result_totals, get_player_result_totals
from clubhub.sql.stats import get_tournament_player_stats
from clubhub.utils.id_types import TournamentId

WIN_RATE_DECIMALS = 1


class Rankable(Protocol):
    rank: int


RankableT = TypeVar("RankableT", bound=Rankable)


def win_rate(wins: int, matches_played: int) -> float:
    if matches_played <= 0:
        return 0.0
    return round(wins / matches_played * 100, WIN_RATE_DECIMALS)


def rank_rows(
    rows: Iterable[RankableT], key: Callable[[RankableT], tuple[Any, ...]]
) -> list[RankableT]:
    """
    Sort rows by `key` and number them 1, 2, 3, ...

    Equal keys keep their input order and still get distinct ranks.
    """
    ranked = sorted(rows, key=key)
    for position, row in enumerate(ranked, start=1):
        row.rank = position
    return ranked


def tournament_player_sort_key(row: PlayerLeaderboardRow) -> tuple[int, ...]:
    return -row.total_points, -row.goals_scored, -row.wins


def public_tournament_player_sort_key(row: PlayerLeaderboardRow) -> tuple[int, ...]:
    return -row.total_points, -row.goal_difference, -row.goals_scored


def overall_player_sort_key(row: PlayerLeaderboardRow) -> tuple[int, ...]:
    return -row.total_points, -row.goal_difference, row.goals_conceded


def team_sort_key(row: TeamLeaderboardRow) -> tuple[int, ...]:
    return -row.total_points, -row.goal_difference, row.goals_conceded


def player_row_from_totals(totals: Mapping[str, Any]) -> PlayerLeaderboardRow:
    return PlayerLeaderboardRow.model_validate(
        {
            **totals,
            "goal_difference": totals["goals_scored"] - totals["goals_conceded"],
            "win_rate": win_rate(totals["wins"], totals["matches_played"]),
        }
    )


def player_row_from_stats(stats: TournamentPlayerStatsWithPlayer) -> PlayerLeaderboardRow:
    return player_row_from_totals(stats.model_dump())


def team_row_from_totals(totals: Mapping[str, Any]) -> TeamLeaderboardRow:
    return TeamLeaderboardRow.model_validate(
        {
            **totals,
            "goal_difference": totals["goals_scored"] - totals["goals_conceded"],
            "win_rate": win_rate(totals["wins"], totals["matches_played"]),
        }
    )


async def get_tournament_leaderboard(
    tournament_id: TournamentId,
    key: Callable[[PlayerLeaderboardRow], tuple[Any, ...]] = tournament_player_sort_key,
) -> list[PlayerLeaderboardRow]:
    stats = await get_tournament_player_stats(tournament_id)
    return rank_rows((player_row_from_stats(row) for row in stats), key=key)


async def get_player_leaderboard(tournament_id: TournamentId | None) -> list[PlayerLeaderboardRow]:
    totals = await get_player_result_totals(tournament_id)
    return rank_rows((player_row_from_totals(row) for row in totals), key=overall_player_sort_key)


async def get_team_leaderboard(tournament_id: TournamentId | None) -> list[TeamLeaderboardRow]:
    totals = await get_club_result_totals(tournament_id)
    return rank_rows(
        (team_row_from_totals(row) for row in totals if row["matches_played"] > 0),
        key=team_sort_key,
    )
