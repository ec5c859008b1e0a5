from fastapi import APIRouter, Depends

from clubhub.config import config
from clubhub.database import database
from clubhub.logic.matches import create_match, create_matches_from_bulk
from clubhub.logic.ranking.leaderboard import get_tournament_leaderboard
from clubhub.logic.statistics import (
    get_template_for_tournament,
    recalculate_tournament_statistics,
)
from clubhub.models.db.admin import AdminPublic
from clubhub.models.db.match import MatchBulkBody, MatchBulkResult, MatchCreateBody
from clubhub.models.db.tournament import (
    ParticipantRemoved,
    ParticipantsAdded,
    ParticipantsBody,
    Tournament,
    TournamentBody,
    TournamentStatus,
    TournamentUpdateBody,
    check_date_range,
)
from clubhub.routes.auth import admin_authenticated
from clubhub.routes.models import (
    DataResponse,
    MatchesResponse,
    ParticipantRemovedResponse,
    ParticipantsAddedResponse,
    ParticipantsResponse,
    PlayerLeaderboardResponse,
    PlayerStatsResponse,
    RecalculationResponse,
    SingleMatchResponse,
    SingleTournamentResponse,
    StagesResponse,
    SuccessResponse,
    TournamentDetailResponse,
    TournamentsResponse,
)
from clubhub.routes.util import tournament_dependency
from clubhub.sql.clubs import get_club_by_id
from clubhub.sql.matches import get_matches_with_results
from clubhub.sql.players import get_players_by_ids
from clubhub.sql.point_systems import get_point_system_template
from clubhub.sql.stats import get_tournament_player_stats
from clubhub.sql.tournaments import (
    get_participants,
    get_tournament_with_counts,
    get_tournaments,
    is_participant,
    sql_add_participants,
    sql_create_tournament,
    sql_delete_tournament,
    sql_remove_participant,
    sql_update_tournament,
)
from clubhub.utils.errors import NotFoundError, ValidationError
from clubhub.utils.id_types import ClubId, PlayerId, PointSystemTemplateId
from clubhub.utils.types import assert_some

router = APIRouter(prefix=config.api_prefix)

SCORING_FIELDS = {
    "point_system_template_id",
    "points_per_win",
    "points_per_draw",
    "points_per_loss",
    "points_per_goal_scored",
    "points_per_goal_conceded",
}


async def check_references_exist(
    club_id: ClubId | None, template_id: PointSystemTemplateId | None
) -> None:
    if club_id is not None and await get_club_by_id(club_id) is None:
        raise NotFoundError("Club")

    if template_id is not None and await get_point_system_template(template_id) is None:
        raise NotFoundError("Point system template")


@router.get("/tournaments", response_model=TournamentsResponse)
async def list_tournaments(
    club_id: ClubId | None = None,
    search: str | None = None,
    status: TournamentStatus | None = None,
    _: AdminPublic = Depends(admin_authenticated),
) -> TournamentsResponse:
    return TournamentsResponse(
        data=await get_tournaments(club_id=club_id, search=search, status=status)
    )


@router.post("/tournaments", response_model=SingleTournamentResponse, status_code=201)
async def create_tournament(
    tournament_body: TournamentBody, _: AdminPublic = Depends(admin_authenticated)
) -> SingleTournamentResponse:
    await check_references_exist(tournament_body.club_id, tournament_body.point_system_template_id)
    return SingleTournamentResponse(data=await sql_create_tournament(tournament_body))


@router.get("/tournaments/{tournament_id}", response_model=TournamentDetailResponse)
async def get_tournament(
    _: AdminPublic = Depends(admin_authenticated),
    tournament: Tournament = Depends(tournament_dependency),
) -> TournamentDetailResponse:
    tournament_with_counts = await get_tournament_with_counts(tournament.id)
    return TournamentDetailResponse(data=assert_some(tournament_with_counts))


@router.put("/tournaments/{tournament_id}", response_model=SingleTournamentResponse)
async def update_tournament(
    tournament_body: TournamentUpdateBody,
    _: AdminPublic = Depends(admin_authenticated),
    tournament: Tournament = Depends(tournament_dependency),
) -> SingleTournamentResponse:
    try:
        check_date_range(
            tournament_body.start_date or tournament.start_date,
            tournament_body.end_date or tournament.end_date,
        )
    except ValueError as exc:
        raise ValidationError(str(exc), details={"end_date": [str(exc)]}) from exc

    await check_references_exist(tournament_body.club_id, tournament_body.point_system_template_id)
    updated = await sql_update_tournament(tournament.id, tournament_body)
    if SCORING_FIELDS & tournament_body.model_fields_set:
        await recalculate_tournament_statistics(tournament.id)

    return SingleTournamentResponse(data=updated)


@router.delete("/tournaments/{tournament_id}", response_model=SuccessResponse)
async def delete_tournament(
    _: AdminPublic = Depends(admin_authenticated),
    tournament: Tournament = Depends(tournament_dependency),
) -> SuccessResponse:
    await sql_delete_tournament(tournament.id)
    return SuccessResponse()


@router.get("/tournaments/{tournament_id}/participants", response_model=ParticipantsResponse)
async def list_participants(
    _: AdminPublic = Depends(admin_authenticated),
    tournament: Tournament = Depends(tournament_dependency),
) -> ParticipantsResponse:
    return ParticipantsResponse(data=await get_participants(tournament.id))


@router.post("/tournaments/{tournament_id}/participants", response_model=ParticipantsAddedResponse)
async def add_participants(
    participants_body: ParticipantsBody,
    _: AdminPublic = Depends(admin_authenticated),
    tournament: Tournament = Depends(tournament_dependency),
) -> ParticipantsAddedResponse:
    requested = list(dict.fromkeys(participants_body.player_ids))
    found = {player.id for player in await get_players_by_ids(requested)}
    missing = [player_id for player_id in requested if player_id not in found]
    if len(missing) > 0:
        raise ValidationError(
            "Some players do not exist",
            details={"player_ids": [f"Player {player_id} not found" for player_id in missing]},
        )

    added = await sql_add_participants(tournament.id, requested)
    return ParticipantsAddedResponse(
        data=ParticipantsAdded(added=added, skipped=len(requested) - added)
    )


@router.delete(
    "/tournaments/{tournament_id}/participants/{player_id}",
    response_model=ParticipantRemovedResponse,
)
async def remove_participant(
    player_id: PlayerId,
    _: AdminPublic = Depends(admin_authenticated),
    tournament: Tournament = Depends(tournament_dependency),
) -> ParticipantRemovedResponse:
    if not await is_participant(tournament.id, player_id):
        raise NotFoundError("Participant")

    deleted_results = await sql_remove_participant(tournament.id, player_id)
    warning = (
        f"This player had {deleted_results} match result(s) which have been deleted"
        if deleted_results > 0
        else None
    )
    return ParticipantRemovedResponse(
        data=ParticipantRemoved(deleted_results=deleted_results, warning=warning)
    )


@router.get("/tournaments/{tournament_id}/stages", response_model=StagesResponse)
async def list_stages(
    _: AdminPublic = Depends(admin_authenticated),
    tournament: Tournament = Depends(tournament_dependency),
) -> StagesResponse:
    template = await get_template_for_tournament(tournament)
    return StagesResponse(data=template.stage_points if template is not None else [])


@router.get("/tournaments/{tournament_id}/matches", response_model=MatchesResponse)
async def list_tournament_matches(
    _: AdminPublic = Depends(admin_authenticated),
    tournament: Tournament = Depends(tournament_dependency),
) -> MatchesResponse:
    return MatchesResponse(data=await get_matches_with_results(tournament.id))


@router.post(
    "/tournaments/{tournament_id}/matches", response_model=SingleMatchResponse, status_code=201
)
async def create_tournament_match(
    match_body: MatchCreateBody,
    _: AdminPublic = Depends(admin_authenticated),
    tournament: Tournament = Depends(tournament_dependency),
) -> SingleMatchResponse:
    return SingleMatchResponse(data=await create_match(tournament, match_body))


@router.post(
    "/tournaments/{tournament_id}/matches/bulk", response_model=DataResponse[MatchBulkResult]
)
async def create_tournament_matches_bulk(
    bulk_body: MatchBulkBody,
    _: AdminPublic = Depends(admin_authenticated),
    tournament: Tournament = Depends(tournament_dependency),
) -> DataResponse[MatchBulkResult]:
    async with database.transaction():
        result = await create_matches_from_bulk(tournament, bulk_body.matches)
    return DataResponse(data=result)


@router.get("/tournaments/{tournament_id}/player-stats", response_model=PlayerStatsResponse)
async def list_player_stats(
    _: AdminPublic = Depends(admin_authenticated),
    tournament: Tournament = Depends(tournament_dependency),
) -> PlayerStatsResponse:
    return PlayerStatsResponse(data=await get_tournament_player_stats(tournament.id))


@router.get("/tournaments/{tournament_id}/leaderboard", response_model=PlayerLeaderboardResponse)
async def tournament_leaderboard(
    _: AdminPublic = Depends(admin_authenticated),
    tournament: Tournament = Depends(tournament_dependency),
) -> PlayerLeaderboardResponse:
    return PlayerLeaderboardResponse(data=await get_tournament_leaderboard(tournament.id))


@router.post(
    "/tournaments/{tournament_id}/recalculate-stats", response_model=RecalculationResponse
)
async def recalculate_stats(
    _: AdminPublic = Depends(admin_authenticated),
    tournament: Tournament = Depends(tournament_dependency),
) -> RecalculationResponse:
    return RecalculationResponse(data=await recalculate_tournament_statistics(tournament.id))
