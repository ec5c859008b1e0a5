from typing import Any

import pytest
from fastapi import HTTPException

from clubhub.logic import statistics
from clubhub.models.db.match import MatchOutcome, MatchResultWithStage
from clubhub.models.db.point_system import FullPointSystemTemplate
from clubhub.models.db.stats import PlayerStatsTotals
from clubhub.models.db.tournament import Tournament
from clubhub.utils.dummy_records import (
    DUMMY_STAGE,
    DUMMY_TEMPLATE,
    DUMMY_TOURNAMENT,
    DUMMY_TOURNAMENT_WITH_TEMPLATE,
    dummy_result,
)
from clubhub.utils.id_types import MatchResultId, PlayerId, PointSystemTemplateId, TournamentId


class _DummyTransaction:
    async def __aenter__(self) -> "_DummyTransaction":
        return self

    async def __aexit__(self, exc_type: Any, exc: Any, tb: Any) -> bool:
        return False


class _FakeStore:
    """In-memory stand-in for the results and stats tables of one tournament."""

    def __init__(self, results: list[MatchResultWithStage], participants: list[int]) -> None:
        self.results = {result.id: result for result in results}
        self.participants = [PlayerId(player_id) for player_id in participants]
        self.stats: dict[PlayerId, PlayerStatsTotals] = {}
        self.result_writes = 0
        self.locks = 0

    async def get_results_in_tournament(self, _: TournamentId) -> list[MatchResultWithStage]:
        return list(self.results.values())

    async def get_results_for_players(
        self, _: TournamentId, player_ids: list[PlayerId]
    ) -> list[MatchResultWithStage]:
        return [result for result in self.results.values() if result.player_id in player_ids]

    async def sql_update_result_points(
        self, result_id: MatchResultId, base_points: int, conditional_points: int
    ) -> None:
        self.result_writes += 1
        self.results[result_id] = self.results[result_id].model_copy(
            update={
                "base_points": base_points,
                "conditional_points": conditional_points,
                "points_earned": base_points + conditional_points,
            }
        )

    async def upsert_player_stats(
        self, _: TournamentId, player_id: PlayerId, totals: PlayerStatsTotals
    ) -> None:
        self.stats[player_id] = totals

    async def get_participant_player_ids(self, _: TournamentId) -> list[PlayerId]:
        return self.participants

    async def acquire_stats_advisory_lock(self, _: TournamentId) -> None:
        self.locks += 1


def install(
    monkeypatch: pytest.MonkeyPatch,
    store: _FakeStore,
    tournament: Tournament | None,
    template: FullPointSystemTemplate | None = None,
) -> None:
    async def fake_get_tournament_by_id(_: TournamentId) -> Tournament | None:
        return tournament

    async def fake_get_point_system_template(
        _: PointSystemTemplateId,
    ) -> FullPointSystemTemplate | None:
        return template

    for name in (
        "get_results_in_tournament",
        "get_results_for_players",
        "sql_update_result_points",
        "upsert_player_stats",
        "get_participant_player_ids",
        "acquire_stats_advisory_lock",
    ):
        monkeypatch.setattr(statistics, name, getattr(store, name))

    monkeypatch.setattr(statistics, "get_tournament_by_id", fake_get_tournament_by_id)
    monkeypatch.setattr(statistics, "get_point_system_template", fake_get_point_system_template)
    monkeypatch.setattr(statistics.database, "transaction", lambda: _DummyTransaction())


def test_aggregate_player_stats() -> None:
    totals = statistics.aggregate_player_stats(
        [
            dummy_result(1, 1, MatchOutcome.WIN, 3, 1, base_points=3, conditional_points=1),
            dummy_result(2, 1, MatchOutcome.DRAW, 2, 2, base_points=1),
            dummy_result(3, 1, MatchOutcome.LOSS, 0, 4),
        ]
    )

    assert totals == PlayerStatsTotals(
        matches_played=3,
        wins=1,
        draws=1,
        losses=1,
        goals_scored=5,
        goals_conceded=7,
        total_points=5,
        conditional_points=1,
    )
    assert totals.goal_difference == -2


def test_aggregate_player_stats_without_results() -> None:
    assert statistics.aggregate_player_stats([]) == PlayerStatsTotals()


@pytest.mark.asyncio
async def test_update_player_statistics_writes_zeros_for_players_without_results(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    store = _FakeStore([dummy_result(1, 1, MatchOutcome.WIN, 1, 0, base_points=3)], [1, 2])
    install(monkeypatch, store, DUMMY_TOURNAMENT)

    await statistics.update_player_statistics(DUMMY_TOURNAMENT.id, [PlayerId(1), PlayerId(2)])

    assert store.stats[PlayerId(1)].total_points == 3
    assert store.stats[PlayerId(2)] == PlayerStatsTotals()


@pytest.mark.asyncio
async def test_recalculate_rescores_results_and_rebuilds_stats(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    store = _FakeStore(
        [
            dummy_result(1, 1, MatchOutcome.WIN, 4, 0, match_id=1),
            dummy_result(2, 2, MatchOutcome.LOSS, 0, 4, match_id=1),
            dummy_result(3, 1, MatchOutcome.DRAW, 1, 1, match_id=2, stage_id=DUMMY_STAGE.id),
            dummy_result(4, 3, MatchOutcome.DRAW, 1, 1, match_id=2, stage_id=DUMMY_STAGE.id),
        ],
        participants=[1, 2, 3, 4],
    )
    install(monkeypatch, store, DUMMY_TOURNAMENT_WITH_TEMPLATE, DUMMY_TEMPLATE)

    summary = await statistics.recalculate_tournament_statistics(
        DUMMY_TOURNAMENT_WITH_TEMPLATE.id
    )

    # 3 + 4 goals - 0 conceded, plus the goals scored bonus
    assert store.results[MatchResultId(1)].base_points == 7
    assert store.results[MatchResultId(1)].conditional_points == 1
    assert store.results[MatchResultId(2)].points_earned == -4
    # Stage coefficients replace the template ones and skip its rules
    assert store.results[MatchResultId(3)].points_earned == DUMMY_STAGE.points_per_draw

    assert store.stats[PlayerId(1)].total_points == 8 + DUMMY_STAGE.points_per_draw
    assert store.stats[PlayerId(1)].matches_played == 2
    assert store.stats[PlayerId(4)] == PlayerStatsTotals()

    assert summary.participants == 4
    assert summary.matches == 2
    assert summary.results_updated == 4
    assert store.locks == 1


@pytest.mark.asyncio
async def test_recalculate_is_idempotent(monkeypatch: pytest.MonkeyPatch) -> None:
    store = _FakeStore(
        [
            dummy_result(1, 1, MatchOutcome.WIN, 2, 1, match_id=1),
            dummy_result(2, 2, MatchOutcome.LOSS, 1, 2, match_id=1),
        ],
        participants=[1, 2],
    )
    install(monkeypatch, store, DUMMY_TOURNAMENT_WITH_TEMPLATE, DUMMY_TEMPLATE)

    first = await statistics.recalculate_tournament_statistics(DUMMY_TOURNAMENT_WITH_TEMPLATE.id)
    results_after_first = dict(store.results)
    stats_after_first = dict(store.stats)

    second = await statistics.recalculate_tournament_statistics(DUMMY_TOURNAMENT_WITH_TEMPLATE.id)

    assert first.results_updated == 2
    assert second.results_updated == 0
    assert store.results == results_after_first
    assert store.stats == stats_after_first


@pytest.mark.asyncio
async def test_recalculate_missing_tournament(monkeypatch: pytest.MonkeyPatch) -> None:
    install(monkeypatch, _FakeStore([], []), None)

    with pytest.raises(HTTPException) as exc_info:
        await statistics.recalculate_tournament_statistics(TournamentId(404))

    assert exc_info.value.status_code == 404
    assert exc_info.value.detail == "Tournament not found"


@pytest.mark.asyncio
async def test_recalculate_missing_template(monkeypatch: pytest.MonkeyPatch) -> None:
    install(monkeypatch, _FakeStore([], []), DUMMY_TOURNAMENT_WITH_TEMPLATE, template=None)

    with pytest.raises(HTTPException) as exc_info:
        await statistics.recalculate_tournament_statistics(DUMMY_TOURNAMENT_WITH_TEMPLATE.id)

    assert exc_info.value.status_code == 404
    assert exc_info.value.detail == "Point system template not found"


@pytest.mark.asyncio
async def test_recalculate_logs_slow_runs(
    monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture
) -> None:
    install(monkeypatch, _FakeStore([], [1]), DUMMY_TOURNAMENT)
    monkeypatch.setattr(statistics.config, "stats_recalc_warn_ms", 0)
    with caplog.at_level("WARNING", logger="clubhub"):
        await statistics.recalculate_tournament_statistics(DUMMY_TOURNAMENT.id)

    assert "recalculation was slow" in caplog.text
