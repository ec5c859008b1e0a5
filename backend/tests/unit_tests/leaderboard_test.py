from typing import Any

import pytest

from clubhub.logic.ranking import leaderboard
from clubhub.logic.ranking.leaderboard import (
    overall_player_sort_key,
    player_row_from_totals,
    public_tournament_player_sort_key,
    rank_rows,
    team_row_from_totals,
    team_sort_key,
    tournament_player_sort_key,
    win_rate,
)
from clubhub.models.db.stats import TournamentPlayerStatsWithPlayer
from clubhub.utils.dummy_records import DUMMY_MOCK_TIME
from clubhub.utils.id_types import PlayerId, TournamentId, TournamentPlayerStatsId


def tournament_stats(
    player_id: int, goals_scored: int, goals_conceded: int
) -> TournamentPlayerStatsWithPlayer:
    return TournamentPlayerStatsWithPlayer(
        id=TournamentPlayerStatsId(player_id),
        tournament_id=TournamentId(1),
        player_id=PlayerId(player_id),
        player_name=f"Player {player_id}",
        updated=DUMMY_MOCK_TIME,
        matches_played=4,
        wins=3,
        draws=1,
        goals_scored=goals_scored,
        goals_conceded=goals_conceded,
        total_points=10,
    )


def player_totals(player_id: int, **overrides: Any) -> dict[str, Any]:
    return {
        "player_id": player_id,
        "player_name": f"Player {player_id}",
        "club_id": None,
        "club_name": None,
        "matches_played": 4,
        "wins": 2,
        "draws": 1,
        "losses": 1,
        "goals_scored": 6,
        "goals_conceded": 4,
        "total_points": 10,
        "conditional_points": 0,
        **overrides,
    }


def club_totals(club_id: int, **overrides: Any) -> dict[str, Any]:
    return {
        "club_id": club_id,
        "club_name": f"Club {club_id}",
        "club_logo": None,
        "player_count": 5,
        "matches_played": 10,
        "wins": 5,
        "draws": 2,
        "losses": 3,
        "goals_scored": 15,
        "goals_conceded": 12,
        "total_points": 17,
        **overrides,
    }


def test_win_rate() -> None:
    assert win_rate(0, 0) == 0.0
    assert win_rate(1, 3) == 33.3
    assert win_rate(2, 3) == 66.7
    assert win_rate(4, 4) == 100.0


def test_ties_get_distinct_sequential_ranks() -> None:
    rows = [
        player_row_from_totals(player_totals(1, total_points=10)),
        player_row_from_totals(player_totals(2, total_points=8)),
        player_row_from_totals(player_totals(3, total_points=10)),
    ]

    ranked = rank_rows(rows, key=tournament_player_sort_key)

    assert [row.total_points for row in ranked] == [10, 10, 8]
    assert [row.rank for row in ranked] == [1, 2, 3]
    assert [row.player_id for row in ranked] == [1, 3, 2]


def test_tournament_sort_breaks_ties_on_goals_then_wins() -> None:
    rows = [
        player_row_from_totals(player_totals(1, goals_scored=5, wins=3)),
        player_row_from_totals(player_totals(2, goals_scored=7, wins=1)),
        player_row_from_totals(player_totals(3, goals_scored=5, wins=4)),
    ]

    ranked = rank_rows(rows, key=tournament_player_sort_key)

    assert [row.player_id for row in ranked] == [2, 3, 1]


def test_overall_sort_breaks_ties_on_goal_difference_then_conceded() -> None:
    rows = [
        player_row_from_totals(player_totals(1, goals_scored=6, goals_conceded=4)),
        player_row_from_totals(player_totals(2, goals_scored=9, goals_conceded=4)),
        player_row_from_totals(player_totals(3, goals_scored=4, goals_conceded=2)),
    ]

    ranked = rank_rows(rows, key=overall_player_sort_key)

    assert [row.player_id for row in ranked] == [2, 3, 1]
    assert ranked[0].goal_difference == 5


def test_player_row_derived_fields() -> None:
    row = player_row_from_totals(player_totals(1, matches_played=0, wins=0))

    assert row.goal_difference == 2
    assert row.win_rate == 0.0
    assert row.rank == 0


def test_team_sort() -> None:
    rows = [
        team_row_from_totals(club_totals(1, total_points=20, goals_scored=10, goals_conceded=8)),
        team_row_from_totals(club_totals(2, total_points=20, goals_scored=10, goals_conceded=5)),
        team_row_from_totals(club_totals(3, total_points=25)),
    ]

    ranked = rank_rows(rows, key=team_sort_key)

    assert [row.club_id for row in ranked] == [3, 2, 1]
    assert ranked[0].win_rate == 50.0


@pytest.mark.asyncio
async def test_team_leaderboard_skips_clubs_without_matches(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    async def fake_get_club_result_totals(_: TournamentId | None) -> list[dict[str, Any]]:
        return [
            club_totals(1),
            club_totals(2, matches_played=0, wins=0, draws=0, losses=0, total_points=0),
        ]

    monkeypatch.setattr(leaderboard, "get_club_result_totals", fake_get_club_result_totals)

    rows = await leaderboard.get_team_leaderboard(None)

    assert [row.club_id for row in rows] == [1]
    assert rows[0].rank == 1


@pytest.mark.asyncio
async def test_player_leaderboard_ranks_totals(monkeypatch: pytest.MonkeyPatch) -> None:
    async def fake_get_player_result_totals(_: TournamentId | None) -> list[dict[str, Any]]:
        return [player_totals(1, total_points=3), player_totals(2, total_points=9)]

    monkeypatch.setattr(leaderboard, "get_player_result_totals", fake_get_player_result_totals)

    rows = await leaderboard.get_player_leaderboard(TournamentId(1))

    assert [(row.rank, row.player_id) for row in rows] == [(1, 2), (2, 1)]


@pytest.mark.asyncio
async def test_public_tournament_order_prefers_goal_difference(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    async def fake_get_tournament_player_stats(
        _: TournamentId,
    ) -> list[TournamentPlayerStatsWithPlayer]:
        return [tournament_stats(1, 8, 8), tournament_stats(2, 5, 1)]

    monkeypatch.setattr(
        leaderboard, "get_tournament_player_stats", fake_get_tournament_player_stats
    )

    admin_rows = await leaderboard.get_tournament_leaderboard(TournamentId(1))
    public_rows = await leaderboard.get_tournament_leaderboard(
        TournamentId(1), key=public_tournament_player_sort_key
    )

    assert [(row.rank, row.player_id) for row in admin_rows] == [(1, 1), (2, 2)]
    assert [(row.rank, row.player_id, row.goal_difference) for row in public_rows] == [
        (1, 2, 4),
        (2, 1, 0),
    ]


def test_public_tournament_sort_falls_back_to_goals_scored() -> None:
    rows = [
        player_row_from_totals(player_totals(1, goals_scored=6, goals_conceded=4)),
        player_row_from_totals(player_totals(2, goals_scored=8, goals_conceded=6)),
    ]

    ranked = rank_rows(rows, key=public_tournament_player_sort_key)

    assert [row.player_id for row in ranked] == [2, 1]
