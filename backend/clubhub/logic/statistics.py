import time
from collections import defaultdict
from collections.abc import Iterable

from clubhub.config import config
from clubhub.database import database
from clubhub.logic.points import calculate_points_with_rules, resolve_point_system_config
from clubhub.models.db.match import MatchOutcome, MatchResult
from clubhub.models.db.point_system import FullPointSystemTemplate
from clubhub.models.db.stats import PlayerStatsTotals, RecalculationSummary
from clubhub.models.db.tournament import Tournament
from clubhub.sql.matches import (
    get_results_for_players,
    get_results_in_tournament,
    sql_update_result_points,
)
from clubhub.sql.point_systems import get_point_system_template
from clubhub.sql.stats import acquire_stats_advisory_lock, upsert_player_stats
from clubhub.sql.tournaments import get_participant_player_ids, get_tournament_by_id
from clubhub.utils.errors import NotFoundError
from clubhub.utils.id_types import PlayerId, TournamentId
from clubhub.utils.logging import logger


def aggregate_player_stats(results: Iterable[MatchResult]) -> PlayerStatsTotals:
    totals = PlayerStatsTotals()
    for result in results:
        totals.matches_played += 1
        totals.wins += result.outcome == MatchOutcome.WIN
        totals.draws += result.outcome == MatchOutcome.DRAW
        totals.losses += result.outcome == MatchOutcome.LOSS
        totals.goals_scored += result.goals_scored
        totals.goals_conceded += result.goals_conceded
        totals.total_points += result.points_earned
        totals.conditional_points += result.conditional_points
    return totals


async def update_player_statistics(tournament_id: TournamentId, player_ids: list[PlayerId]) -> None:
    """Rebuild the rollup rows of the given players from their results in the tournament."""
    if len(player_ids) < 1:
        return

    results_by_player: dict[PlayerId, list[MatchResult]] = defaultdict(list)
    for result in await get_results_for_players(tournament_id, player_ids):
        results_by_player[result.player_id].append(result)

    for player_id in sorted(set(player_ids)):
        await upsert_player_stats(
            tournament_id, player_id, aggregate_player_stats(results_by_player[player_id])
        )


async def get_template_for_tournament(
    tournament: Tournament, *, strict: bool = False
) -> FullPointSystemTemplate | None:
    if tournament.point_system_template_id is None:
        return None

    template = await get_point_system_template(tournament.point_system_template_id)
    if template is None and strict:
        raise NotFoundError("Point system template")
    return template


async def recalculate_tournament_statistics(tournament_id: TournamentId) -> RecalculationSummary:
    """
    Rescore every result of a tournament and rebuild all of its player rollups.

    Runs in a single transaction holding an advisory lock on the tournament, so concurrent
    recalculations of the same tournament are serialized. Running it twice in a row leaves the
    database exactly as the first run left it.
    """
    tournament = await get_tournament_by_id(tournament_id)
    if tournament is None:
        raise NotFoundError("Tournament")

    template = await get_template_for_tournament(tournament, strict=True)
    started_at = time.monotonic()

    async with database.transaction():
        await acquire_stats_advisory_lock(tournament_id)

        results = await get_results_in_tournament(tournament_id)
        rescored: list[MatchResult] = []
        results_updated = 0
        for result in results:
            point_config = resolve_point_system_config(tournament, template, result.stage_id)
            points = calculate_points_with_rules(result, point_config)
            stored = (result.base_points, result.conditional_points, result.points_earned)
            if stored != (points.base_points, points.conditional_points, points.total_points):
                await sql_update_result_points(
                    result.id, points.base_points, points.conditional_points
                )
                results_updated += 1

            rescored.append(
                result.model_copy(
                    update={
                        "base_points": points.base_points,
                        "conditional_points": points.conditional_points,
                        "points_earned": points.total_points,
                    }
                )
            )

        participant_ids = await get_participant_player_ids(tournament_id)
        player_ids = sorted(set(participant_ids) | {result.player_id for result in results})

        results_by_player: dict[PlayerId, list[MatchResult]] = defaultdict(list)
        for result in rescored:
            results_by_player[result.player_id].append(result)

        for player_id in player_ids:
            await upsert_player_stats(
                tournament_id, player_id, aggregate_player_stats(results_by_player[player_id])
            )

    duration_ms = int((time.monotonic() - started_at) * 1000)
    if duration_ms >= config.stats_recalc_warn_ms:
        logger.warning(
            "Tournament statistics recalculation was slow: tournament_id=%s duration_ms=%s",
            int(tournament_id),
            duration_ms,
        )

    return RecalculationSummary(
        tournament_id=tournament_id,
        participants=len(participant_ids),
        matches=len({result.match_id for result in results}),
        results_updated=results_updated,
        duration_ms=duration_ms,
    )
