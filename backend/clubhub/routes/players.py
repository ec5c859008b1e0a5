from fastapi import APIRouter, Depends, UploadFile

from clubhub.config import config
from clubhub.models.db.admin import AdminPublic
from clubhub.models.db.player import FreeAgentBody, PlayerUpdateBody, PlayerWithClub
from clubhub.routes.auth import admin_authenticated
from clubhub.routes.models import (
    PaginatedPlayers,
    PlayersResponse,
    SinglePlayerResponse,
    SuccessResponse,
)
from clubhub.routes.util import (
    free_agent_dependency,
    player_dependency,
    read_validated_image_upload,
    remove_upload,
    store_upload,
)
from clubhub.sql.players import (
    get_player_by_email,
    get_player_by_id,
    get_player_count,
    get_players,
    sql_create_player,
    sql_delete_player,
    sql_update_player,
    sql_update_player_photo,
)
from clubhub.utils.errors import (
    ConflictError,
    ForeignKey,
    ValidationError,
    check_foreign_key_violation,
)
from clubhub.utils.id_types import ClubId
from clubhub.utils.pagination import Pagination
from clubhub.utils.types import assert_some

router = APIRouter(prefix=config.api_prefix)


async def check_email_not_taken_by_other(player: PlayerWithClub, body: PlayerUpdateBody) -> None:
    if body.email is None or body.email == player.email:
        return

    existing = await get_player_by_email(body.email)
    if existing is not None and existing.id != player.id:
        raise ConflictError("A player with this email already exists")


async def delete_player_and_photo(player: PlayerWithClub) -> None:
    with check_foreign_key_violation(
        {
            ForeignKey.match_results_player_id_fkey,
            ForeignKey.tournament_participants_player_id_fkey,
        }
    ):
        await sql_delete_player(player.id)

    await remove_upload(player.photo)


@router.get("/players", response_model=PlayersResponse)
async def list_players(
    club_id: ClubId | None = None,
    search: str | None = None,
    pagination: Pagination = Depends(),
    _: AdminPublic = Depends(admin_authenticated),
) -> PlayersResponse:
    return PlayersResponse(
        data=PaginatedPlayers(
            players=await get_players(club_id=club_id, search=search, pagination=pagination),
            count=await get_player_count(club_id=club_id, search=search),
        )
    )


@router.get("/players/{player_id}", response_model=SinglePlayerResponse)
async def get_player(
    _: AdminPublic = Depends(admin_authenticated),
    player: PlayerWithClub = Depends(player_dependency),
) -> SinglePlayerResponse:
    return SinglePlayerResponse(data=player)


@router.put("/players/{player_id}", response_model=SinglePlayerResponse)
async def update_player(
    player_body: PlayerUpdateBody,
    _: AdminPublic = Depends(admin_authenticated),
    player: PlayerWithClub = Depends(player_dependency),
) -> SinglePlayerResponse:
    await check_email_not_taken_by_other(player, player_body)
    return SinglePlayerResponse(data=await sql_update_player(player, player_body))


@router.delete("/players/{player_id}", response_model=SuccessResponse)
async def delete_player(
    _: AdminPublic = Depends(admin_authenticated),
    player: PlayerWithClub = Depends(player_dependency),
) -> SuccessResponse:
    await delete_player_and_photo(player)
    return SuccessResponse()


@router.post("/players/{player_id}/photo", response_model=SinglePlayerResponse)
async def update_player_photo(
    file: UploadFile | None = None,
    _: AdminPublic = Depends(admin_authenticated),
    player: PlayerWithClub = Depends(player_dependency),
) -> SinglePlayerResponse:
    new_photo: str | None = None
    if file is not None:
        image_bytes, extension = await read_validated_image_upload(file, file_label="Player photo")
        new_photo = await store_upload("player-photos", image_bytes, extension)

    if player.photo != new_photo:
        await remove_upload(player.photo)

    await sql_update_player_photo(player.id, new_photo)
    return SinglePlayerResponse(data=assert_some(await get_player_by_id(player.id)))


@router.get("/free-agents", response_model=PlayersResponse)
async def list_free_agents(
    search: str | None = None,
    pagination: Pagination = Depends(),
    _: AdminPublic = Depends(admin_authenticated),
) -> PlayersResponse:
    return PlayersResponse(
        data=PaginatedPlayers(
            players=await get_players(free_agents_only=True, search=search, pagination=pagination),
            count=await get_player_count(free_agents_only=True, search=search),
        )
    )


@router.post("/free-agents", response_model=SinglePlayerResponse, status_code=201)
async def create_free_agent(
    free_agent_body: FreeAgentBody, _: AdminPublic = Depends(admin_authenticated)
) -> SinglePlayerResponse:
    if await get_player_by_email(free_agent_body.email) is not None:
        raise ValidationError(
            "A player with this email already exists",
            details={"email": ["A player with this email already exists"]},
        )

    return SinglePlayerResponse(
        data=await sql_create_player(free_agent_body.to_player_body(), club_id=None)
    )


@router.get("/free-agents/{player_id}", response_model=SinglePlayerResponse)
async def get_free_agent(
    _: AdminPublic = Depends(admin_authenticated),
    player: PlayerWithClub = Depends(free_agent_dependency),
) -> SinglePlayerResponse:
    return SinglePlayerResponse(data=player)


@router.put("/free-agents/{player_id}", response_model=SinglePlayerResponse)
async def update_free_agent(
    player_body: PlayerUpdateBody,
    _: AdminPublic = Depends(admin_authenticated),
    player: PlayerWithClub = Depends(free_agent_dependency),
) -> SinglePlayerResponse:
    await check_email_not_taken_by_other(player, player_body)
    return SinglePlayerResponse(data=await sql_update_player(player, player_body))


@router.delete("/free-agents/{player_id}", response_model=SuccessResponse)
async def delete_free_agent(
    _: AdminPublic = Depends(admin_authenticated),
    player: PlayerWithClub = Depends(free_agent_dependency),
) -> SuccessResponse:
    await delete_player_and_photo(player)
    return SuccessResponse()
