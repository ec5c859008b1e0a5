from fastapi import HTTPException

from clubhub.logic.points import calculate_points_with_rules, resolve_point_system_config
from clubhub.logic.statistics import get_template_for_tournament, update_player_statistics
from clubhub.models.db.match import (
    BulkMatchEntry,
    Match,
    MatchBulkResult,
    MatchCreateBody,
    MatchResultBody,
    MatchUpdateBody,
    MatchWithResults,
    ScoredResult,
)
from clubhub.models.db.point_system import FullPointSystemTemplate
from clubhub.models.db.tournament import Tournament
from clubhub.sql.matches import (
    get_match_with_results,
    get_player_ids_of_match,
    sql_create_match,
    sql_delete_match,
    sql_update_match,
)
from clubhub.sql.tournaments import get_participant_player_ids, get_participants
from clubhub.utils.errors import ValidationError
from clubhub.utils.id_types import StagePointId
from clubhub.utils.types import assert_some


def score_results(
    tournament: Tournament,
    template: FullPointSystemTemplate | None,
    stage_id: StagePointId | None,
    results: list[MatchResultBody],
) -> list[ScoredResult]:
    point_config = resolve_point_system_config(tournament, template, stage_id)
    scored = []
    for result in results:
        points = calculate_points_with_rules(result, point_config)
        scored.append(
            ScoredResult(
                **result.model_dump(),
                base_points=points.base_points,
                conditional_points=points.conditional_points,
                points_earned=points.total_points,
            )
        )
    return scored


async def check_results_belong_to_tournament(
    tournament: Tournament, results: list[MatchResultBody]
) -> None:
    participant_ids = set(await get_participant_player_ids(tournament.id))
    outsiders = sorted({result.player_id for result in results} - participant_ids)
    if len(outsiders) > 0:
        raise ValidationError(
            "All players must be participants in this tournament",
            details={
                "results": [f"Player {player_id} is not a participant" for player_id in outsiders]
            },
        )


def resolve_stage(
    template: FullPointSystemTemplate | None,
    stage_id: StagePointId | None,
    stage_name: str | None,
) -> tuple[StagePointId | None, str | None]:
    if stage_id is None:
        return None, stage_name

    stage = template.get_stage(stage_id) if template is not None else None
    if stage is None:
        raise ValidationError("Stage does not belong to the point system of this tournament")
    return stage.id, stage_name or stage.stage_name


async def create_match(tournament: Tournament, body: MatchCreateBody) -> MatchWithResults:
    await check_results_belong_to_tournament(tournament, body.results)
    template = await get_template_for_tournament(tournament)
    stage_id, stage_name = resolve_stage(template, body.stage_id, body.stage_name)

    match = await sql_create_match(
        tournament.id,
        body.match_date,
        stage_id,
        stage_name,
        score_results(tournament, template, stage_id, body.results),
    )
    await update_player_statistics(tournament.id, [result.player_id for result in body.results])
    return match


async def update_match(
    tournament: Tournament, match: Match, body: MatchUpdateBody
) -> MatchWithResults:
    values = body.model_dump(exclude_unset=True, exclude={"results"})
    template = await get_template_for_tournament(tournament)

    if "stage_id" in values or "stage_name" in values:
        values["stage_id"], values["stage_name"] = resolve_stage(
            template,
            values.get("stage_id", match.stage_id),
            values.get("stage_name", match.stage_name),
        )

    previous_player_ids = await get_player_ids_of_match(match.id)
    stage_changed = values.get("stage_id", match.stage_id) != match.stage_id
    results = body.results

    if results is None and stage_changed:
        existing = assert_some(await get_match_with_results(match.id))
        results = [
            MatchResultBody(
                **result.model_dump(
                    include={"player_id", "outcome", "goals_scored", "goals_conceded"}
                )
            )
            for result in existing.results
        ]

    scored = None
    if results is not None:
        await check_results_belong_to_tournament(tournament, results)
        stage_id = values.get("stage_id", match.stage_id)
        scored = score_results(tournament, template, stage_id, results)

    updated = await sql_update_match(match.id, values, scored)
    affected = set(previous_player_ids) | {result.player_id for result in updated.results}
    await update_player_statistics(tournament.id, sorted(affected))
    return updated


async def delete_match(match: Match) -> None:
    player_ids = await get_player_ids_of_match(match.id)
    await sql_delete_match(match.id)
    await update_player_statistics(match.tournament_id, player_ids)


async def create_matches_from_bulk(
    tournament: Tournament, entries: list[BulkMatchEntry]
) -> MatchBulkResult:
    """Create two-player matches, looking players up by name among the participants."""
    participants_by_name = {
        participant.player.name.lower(): participant.player.id
        for participant in await get_participants(tournament.id)
    }
    result = MatchBulkResult(added=0, skipped=0)

    for entry in entries:
        player_a_id = participants_by_name.get(entry.player_a_name.lower())
        player_b_id = participants_by_name.get(entry.player_b_name.lower())
        if player_a_id is None or player_b_id is None or player_a_id == player_b_id:
            result.errors.append(
                f"Players not found: {entry.player_a_name} vs {entry.player_b_name}"
            )
            result.skipped += 1
            continue

        outcome_a, outcome_b = entry.outcomes()
        body = MatchCreateBody(
            match_date=entry.match_date,
            results=[
                MatchResultBody(
                    player_id=player_a_id,
                    outcome=outcome_a,
                    goals_scored=entry.player_a_goals,
                    goals_conceded=entry.player_b_goals,
                ),
                MatchResultBody(
                    player_id=player_b_id,
                    outcome=outcome_b,
                    goals_scored=entry.player_b_goals,
                    goals_conceded=entry.player_a_goals,
                ),
            ],
        )
        try:
            await create_match(tournament, body)
        except HTTPException as exc:
            result.errors.append(
                f"Failed to add match {entry.player_a_name} vs {entry.player_b_name}: {exc.detail}"
            )
            result.skipped += 1
            continue

        result.added += 1

    return result
