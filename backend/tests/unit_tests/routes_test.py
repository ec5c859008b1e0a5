from typing import Any

import pytest
from fastapi import HTTPException
from heliclockter import datetime_utc, timedelta

from clubhub.logic.ranking import leaderboard
from clubhub.models.db.point_system import FullPointSystemTemplate
from clubhub.models.db.stats import RecalculationSummary, TournamentPlayerStatsWithPlayer
from clubhub.models.db.tournament import (
    Tournament,
    TournamentStatus,
    TournamentUpdateBody,
    TournamentWithCounts,
)
from clubhub.models.db.transfer import TransferBody
from clubhub.routes import point_systems as point_system_routes
from clubhub.routes import public as public_routes
from clubhub.routes import tournaments as tournament_routes
from clubhub.routes import transfers as transfer_routes
from clubhub.utils.dummy_records import (
    DUMMY_ADMIN,
    DUMMY_CLUB,
    DUMMY_MOCK_TIME,
    DUMMY_TEMPLATE,
    DUMMY_TOURNAMENT,
    DUMMY_TOURNAMENT_WITH_TEMPLATE,
    dummy_player,
)
from clubhub.utils.id_types import (
    ClubId,
    PlayerId,
    PointSystemTemplateId,
    TournamentId,
    TournamentPlayerStatsId,
)
from clubhub.utils.pagination import PaginationPublic


def _summary(tournament_id: TournamentId) -> RecalculationSummary:
    return RecalculationSummary(
        tournament_id=tournament_id, participants=2, matches=1, results_updated=2, duration_ms=5
    )


@pytest.mark.asyncio
async def test_recalculate_route_returns_summary(monkeypatch: pytest.MonkeyPatch) -> None:
    calls = {"recalculate": 0}

    async def fake_recalculate(tournament_id: TournamentId) -> RecalculationSummary:
        calls["recalculate"] += 1
        return _summary(tournament_id)

    monkeypatch.setattr(tournament_routes, "recalculate_tournament_statistics", fake_recalculate)

    response = await tournament_routes.recalculate_stats(DUMMY_ADMIN, DUMMY_TOURNAMENT)

    assert response.data.tournament_id == DUMMY_TOURNAMENT.id
    assert response.data.results_updated == 2
    assert calls["recalculate"] == 1


@pytest.mark.parametrize(
    ("body", "expected_recalculations"),
    [
        (TournamentUpdateBody(name="Renamed"), 0),
        (TournamentUpdateBody(points_per_win=2), 1),
        (TournamentUpdateBody(point_system_template_id=None), 1),
    ],
)
@pytest.mark.asyncio
async def test_update_tournament_recalculates_on_scoring_changes(
    monkeypatch: pytest.MonkeyPatch, body: TournamentUpdateBody, expected_recalculations: int
) -> None:
    calls = {"recalculate": 0}

    async def fake_update(_: TournamentId, __: TournamentUpdateBody) -> Tournament:
        return DUMMY_TOURNAMENT

    async def fake_recalculate(tournament_id: TournamentId) -> RecalculationSummary:
        calls["recalculate"] += 1
        return _summary(tournament_id)

    monkeypatch.setattr(tournament_routes, "sql_update_tournament", fake_update)
    monkeypatch.setattr(tournament_routes, "recalculate_tournament_statistics", fake_recalculate)

    await tournament_routes.update_tournament(body, DUMMY_ADMIN, DUMMY_TOURNAMENT)

    assert calls["recalculate"] == expected_recalculations


@pytest.mark.asyncio
async def test_update_tournament_rejects_end_before_existing_start() -> None:
    body = TournamentUpdateBody(end_date=DUMMY_TOURNAMENT.start_date - timedelta(days=1))

    with pytest.raises(HTTPException) as exc_info:
        await tournament_routes.update_tournament(body, DUMMY_ADMIN, DUMMY_TOURNAMENT)

    assert exc_info.value.status_code == 400


@pytest.mark.asyncio
async def test_delete_template_in_use_lists_tournaments(monkeypatch: pytest.MonkeyPatch) -> None:
    deleted: list[PointSystemTemplateId] = []

    async def fake_names(_: PointSystemTemplateId) -> list[str]:
        return ["Spring Cup", "Autumn Cup"]

    async def fake_delete(template_id: PointSystemTemplateId) -> None:
        deleted.append(template_id)

    monkeypatch.setattr(point_system_routes, "get_tournament_names_using_template", fake_names)
    monkeypatch.setattr(point_system_routes, "sql_delete_point_system_template", fake_delete)

    with pytest.raises(HTTPException) as exc_info:
        await point_system_routes.delete_point_system(DUMMY_ADMIN, DUMMY_TEMPLATE)

    assert exc_info.value.status_code == 409
    assert "Spring Cup, Autumn Cup" in exc_info.value.detail
    assert deleted == []


@pytest.mark.asyncio
async def test_template_names_must_be_unique(monkeypatch: pytest.MonkeyPatch) -> None:
    async def fake_get_template_id_by_name(_: str) -> PointSystemTemplateId:
        return DUMMY_TEMPLATE.id

    monkeypatch.setattr(
        point_system_routes, "get_template_id_by_name", fake_get_template_id_by_name
    )

    # Renaming a template to its own name is fine
    await point_system_routes.check_name_available(DUMMY_TEMPLATE.name, DUMMY_TEMPLATE.id)

    with pytest.raises(HTTPException) as exc_info:
        await point_system_routes.check_name_available(DUMMY_TEMPLATE.name)
    assert exc_info.value.status_code == 409


@pytest.mark.asyncio
async def test_transfer_to_current_club_is_rejected(monkeypatch: pytest.MonkeyPatch) -> None:
    async def fake_get_player_by_id(player_id: PlayerId) -> Any:
        return dummy_player(player_id, "Alex", club_id=DUMMY_CLUB.id)

    async def fake_get_club_by_id(_: ClubId) -> Any:
        return DUMMY_CLUB

    monkeypatch.setattr(transfer_routes, "get_player_by_id", fake_get_player_by_id)
    monkeypatch.setattr(transfer_routes, "get_club_by_id", fake_get_club_by_id)

    with pytest.raises(HTTPException) as exc_info:
        await transfer_routes.create_transfer(
            TransferBody(player_id=PlayerId(1), to_club_id=DUMMY_CLUB.id), DUMMY_ADMIN
        )

    assert exc_info.value.status_code == 400
    assert exc_info.value.detail == "Player is already in this club"


@pytest.mark.asyncio
async def test_public_tournaments_report_status(monkeypatch: pytest.MonkeyPatch) -> None:
    now = datetime_utc.now()
    base = TournamentWithCounts(**DUMMY_TOURNAMENT.model_dump())
    upcoming = base.model_copy(
        update={"start_date": now + timedelta(days=3), "end_date": now + timedelta(days=10)}
    )
    finished = base.model_copy(
        update={
            "id": TournamentId(2),
            "start_date": now - timedelta(days=10),
            "end_date": now - timedelta(days=3),
        }
    )

    async def fake_get_tournaments(**_: Any) -> list[TournamentWithCounts]:
        return [upcoming, finished]

    async def fake_get_tournament_count(**_: Any) -> int:
        return 2

    monkeypatch.setattr(public_routes, "get_tournaments", fake_get_tournaments)
    monkeypatch.setattr(public_routes, "get_tournament_count", fake_get_tournament_count)

    response = await public_routes.public_tournaments(
        status=None, pagination=PaginationPublic(page=1, page_size=20)
    )

    assert [t.status for t in response.data.tournaments] == [
        TournamentStatus.UPCOMING,
        TournamentStatus.COMPLETED,
    ]
    assert response.data.pagination.total == 2


@pytest.mark.asyncio
async def test_public_player_not_found(monkeypatch: pytest.MonkeyPatch) -> None:
    async def fake_get_player_by_id(_: PlayerId) -> None:
        return None

    monkeypatch.setattr(public_routes, "get_player_by_id", fake_get_player_by_id)

    with pytest.raises(HTTPException) as exc_info:
        await public_routes.public_player(PlayerId(404))

    assert exc_info.value.status_code == 404
    assert exc_info.value.detail == "Player not found"


@pytest.mark.asyncio
async def test_public_tournament_includes_template_stages(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    tournament = TournamentWithCounts(**DUMMY_TOURNAMENT_WITH_TEMPLATE.model_dump())

    async def fake_get_tournament_with_counts(_: TournamentId) -> TournamentWithCounts:
        return tournament

    async def fake_get_template(_: Tournament, **__: Any) -> FullPointSystemTemplate:
        return DUMMY_TEMPLATE

    monkeypatch.setattr(
        public_routes, "get_tournament_with_counts", fake_get_tournament_with_counts
    )
    monkeypatch.setattr(public_routes, "get_template_for_tournament", fake_get_template)

    response = await public_routes.public_tournament(tournament.id)

    assert response.data.tournament.id == tournament.id
    assert [stage.stage_name for stage in response.data.stages] == ["Final"]


@pytest.mark.asyncio
async def test_club_history_requires_existing_player(monkeypatch: pytest.MonkeyPatch) -> None:
    periods_requested: list[PlayerId] = []

    async def fake_get_player_by_id(_: PlayerId) -> None:
        return None

    async def fake_get_club_periods(player_id: PlayerId) -> list[Any]:
        periods_requested.append(player_id)
        return []

    monkeypatch.setattr(transfer_routes, "get_player_by_id", fake_get_player_by_id)
    monkeypatch.setattr(transfer_routes, "get_club_periods", fake_get_club_periods)

    with pytest.raises(HTTPException) as exc_info:
        await transfer_routes.get_club_history(PlayerId(9), DUMMY_ADMIN)

    assert exc_info.value.status_code == 404
    assert periods_requested == []


@pytest.mark.asyncio
async def test_public_tournament_leaderboard_ranks_by_goal_difference(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    def stats(player_id: int, goals_scored: int, goals_conceded: int) -> Any:
        return TournamentPlayerStatsWithPlayer(
            id=TournamentPlayerStatsId(player_id),
            tournament_id=DUMMY_TOURNAMENT.id,
            player_id=PlayerId(player_id),
            player_name=f"Player {player_id}",
            updated=DUMMY_MOCK_TIME,
            matches_played=2,
            wins=1,
            draws=1,
            goals_scored=goals_scored,
            goals_conceded=goals_conceded,
            total_points=10,
        )

    async def fake_get_tournament_by_id(_: TournamentId) -> Tournament:
        return DUMMY_TOURNAMENT

    async def fake_get_tournament_player_stats(_: TournamentId) -> list[Any]:
        return [stats(1, 8, 8), stats(2, 5, 1)]

    monkeypatch.setattr(public_routes, "get_tournament_by_id", fake_get_tournament_by_id)
    monkeypatch.setattr(
        leaderboard, "get_tournament_player_stats", fake_get_tournament_player_stats
    )

    response = await public_routes.public_tournament_leaderboard(DUMMY_TOURNAMENT.id)

    assert [(row.rank, row.player_id) for row in response.data] == [(1, 2), (2, 1)]
