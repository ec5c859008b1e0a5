from fastapi import APIRouter, Depends, UploadFile

from clubhub.config import config
from clubhub.logic.clubs import build_club_hierarchy
from clubhub.models.db.admin import AdminPublic
from clubhub.models.db.club import Club, ClubBody, ClubUpdateBody
from clubhub.models.db.player import BulkCreateResult, PlayerBody, PlayerBulkBody, PlayerRole
from clubhub.routes.auth import admin_authenticated
from clubhub.routes.models import (
    ClubDetailResponse,
    ClubHierarchyResponse,
    ClubsResponse,
    DataResponse,
    PlayerListResponse,
    SingleClubResponse,
    SinglePlayerResponse,
    SuccessResponse,
    TournamentsResponse,
)
from clubhub.routes.util import (
    club_dependency,
    read_validated_image_upload,
    remove_upload,
    store_upload,
)
from clubhub.sql.clubs import (
    get_club_with_counts,
    get_clubs,
    sql_create_club,
    sql_delete_club,
    sql_update_club,
    sql_update_club_logo,
)
from clubhub.sql.players import get_player_by_email, get_players, sql_create_player
from clubhub.sql.tournaments import get_tournaments
from clubhub.utils.errors import ForeignKey, ValidationError, check_foreign_key_violation
from clubhub.utils.types import assert_some

router = APIRouter(prefix=config.api_prefix)


@router.get("/clubs", response_model=ClubsResponse)
async def list_clubs(
    search: str | None = None, _: AdminPublic = Depends(admin_authenticated)
) -> ClubsResponse:
    return ClubsResponse(data=await get_clubs(search))


@router.post("/clubs", response_model=SingleClubResponse, status_code=201)
async def create_club(
    club_body: ClubBody, _: AdminPublic = Depends(admin_authenticated)
) -> SingleClubResponse:
    return SingleClubResponse(data=await sql_create_club(club_body))


@router.get("/clubs/{club_id}", response_model=ClubDetailResponse)
async def get_club(
    _: AdminPublic = Depends(admin_authenticated),
    club: Club = Depends(club_dependency),
) -> ClubDetailResponse:
    return ClubDetailResponse(data=assert_some(await get_club_with_counts(club.id)))


@router.put("/clubs/{club_id}", response_model=SingleClubResponse)
async def update_club(
    club_body: ClubUpdateBody,
    _: AdminPublic = Depends(admin_authenticated),
    club: Club = Depends(club_dependency),
) -> SingleClubResponse:
    return SingleClubResponse(data=await sql_update_club(club.id, club_body))


@router.delete("/clubs/{club_id}", response_model=SuccessResponse)
async def delete_club(
    _: AdminPublic = Depends(admin_authenticated),
    club: Club = Depends(club_dependency),
) -> SuccessResponse:
    with check_foreign_key_violation({ForeignKey.tournaments_club_id_fkey}):
        await sql_delete_club(club.id)

    await remove_upload(club.logo)
    return SuccessResponse()


@router.post("/clubs/{club_id}/logo", response_model=SingleClubResponse)
async def update_club_logo(
    file: UploadFile | None = None,
    _: AdminPublic = Depends(admin_authenticated),
    club: Club = Depends(club_dependency),
) -> SingleClubResponse:
    new_logo: str | None = None
    if file is not None:
        image_bytes, extension = await read_validated_image_upload(file, file_label="Club logo")
        new_logo = await store_upload("club-logos", image_bytes, extension)

    if club.logo != new_logo:
        await remove_upload(club.logo)

    await sql_update_club_logo(club.id, new_logo)
    return SingleClubResponse(data=assert_some(await get_club_with_counts(club.id)))


@router.get("/clubs/{club_id}/hierarchy", response_model=ClubHierarchyResponse)
async def get_club_hierarchy(
    _: AdminPublic = Depends(admin_authenticated),
    club: Club = Depends(club_dependency),
) -> ClubHierarchyResponse:
    players = await get_players(club_id=club.id)
    return ClubHierarchyResponse(data=build_club_hierarchy(club, players))


@router.get("/clubs/{club_id}/players", response_model=PlayerListResponse)
async def get_club_players(
    role: PlayerRole | None = None,
    _: AdminPublic = Depends(admin_authenticated),
    club: Club = Depends(club_dependency),
) -> PlayerListResponse:
    return PlayerListResponse(data=await get_players(club_id=club.id, role=role))


@router.post("/clubs/{club_id}/players", response_model=SinglePlayerResponse, status_code=201)
async def create_club_player(
    player_body: PlayerBody,
    _: AdminPublic = Depends(admin_authenticated),
    club: Club = Depends(club_dependency),
) -> SinglePlayerResponse:
    if player_body.email is not None and await get_player_by_email(player_body.email) is not None:
        raise ValidationError("A player with this email already exists")

    return SinglePlayerResponse(data=await sql_create_player(player_body, club.id))


@router.post("/clubs/{club_id}/players/bulk", response_model=DataResponse[BulkCreateResult])
async def create_club_players_bulk(
    bulk_body: PlayerBulkBody,
    _: AdminPublic = Depends(admin_authenticated),
    club: Club = Depends(club_dependency),
) -> DataResponse[BulkCreateResult]:
    added = 0
    skipped = 0
    seen_emails: set[str] = set()

    for player_body in bulk_body.with_default_place():
        email = player_body.email
        if email is not None and (
            email in seen_emails or await get_player_by_email(email) is not None
        ):
            skipped += 1
            continue

        await sql_create_player(player_body, club.id)
        if email is not None:
            seen_emails.add(email)
        added += 1

    return DataResponse(data=BulkCreateResult(added=added, skipped=skipped))


@router.get("/clubs/{club_id}/tournaments", response_model=TournamentsResponse)
async def get_club_tournaments(
    _: AdminPublic = Depends(admin_authenticated),
    club: Club = Depends(club_dependency),
) -> TournamentsResponse:
    return TournamentsResponse(data=await get_tournaments(club_id=club.id))
