from fastapi import APIRouter, Depends

from clubhub.config import config
from clubhub.logic.matches import delete_match, update_match
from clubhub.models.db.admin import AdminPublic
from clubhub.models.db.match import Match, MatchUpdateBody
from clubhub.routes.auth import admin_authenticated
from clubhub.routes.models import MatchesResponse, SingleMatchResponse, SuccessResponse
from clubhub.routes.util import match_dependency
from clubhub.sql.matches import get_match_with_results, get_matches_with_results
from clubhub.sql.tournaments import get_tournament_by_id
from clubhub.utils.id_types import TournamentId
from clubhub.utils.types import assert_some

router = APIRouter(prefix=config.api_prefix)


@router.get("/matches", response_model=MatchesResponse)
async def list_matches(
    tournament_id: TournamentId | None = None, _: AdminPublic = Depends(admin_authenticated)
) -> MatchesResponse:
    return MatchesResponse(data=await get_matches_with_results(tournament_id))


@router.get("/matches/{match_id}", response_model=SingleMatchResponse)
async def get_match(
    _: AdminPublic = Depends(admin_authenticated),
    match: Match = Depends(match_dependency),
) -> SingleMatchResponse:
    return SingleMatchResponse(data=assert_some(await get_match_with_results(match.id)))


@router.put("/matches/{match_id}", response_model=SingleMatchResponse)
async def update_match_by_id(
    match_body: MatchUpdateBody,
    _: AdminPublic = Depends(admin_authenticated),
    match: Match = Depends(match_dependency),
) -> SingleMatchResponse:
    tournament = assert_some(await get_tournament_by_id(match.tournament_id))
    return SingleMatchResponse(data=await update_match(tournament, match, match_body))


@router.delete("/matches/{match_id}", response_model=SuccessResponse)
async def delete_match_by_id(
    _: AdminPublic = Depends(admin_authenticated),
    match: Match = Depends(match_dependency),
) -> SuccessResponse:
    await delete_match(match)
    return SuccessResponse()
