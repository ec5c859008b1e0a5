from fastapi import APIRouter, Depends
from heliclockter import datetime_utc

from clubhub.config import config
from clubhub.models.db.admin import AdminPublic
from clubhub.models.db.transfer import TransferBody
from clubhub.routes.auth import admin_authenticated
from clubhub.routes.models import ClubPeriodsResponse, SingleTransferResponse, TransfersResponse
from clubhub.sql.clubs import get_club_by_id
from clubhub.sql.players import get_player_by_id
from clubhub.sql.transfers import get_club_periods, get_transfers, sql_transfer_player
from clubhub.utils.errors import NotFoundError, ValidationError
from clubhub.utils.id_types import PlayerId

router = APIRouter(prefix=config.api_prefix)


@router.get("/transfers", response_model=TransfersResponse)
async def list_transfers(
    player_id: PlayerId | None = None, _: AdminPublic = Depends(admin_authenticated)
) -> TransfersResponse:
    return TransfersResponse(data=await get_transfers(player_id))


@router.post("/transfers", response_model=SingleTransferResponse, status_code=201)
async def create_transfer(
    transfer_body: TransferBody, _: AdminPublic = Depends(admin_authenticated)
) -> SingleTransferResponse:
    player = await get_player_by_id(transfer_body.player_id)
    if player is None:
        raise NotFoundError("Player")

    to_club_id = transfer_body.to_club_id
    if to_club_id is not None and await get_club_by_id(to_club_id) is None:
        raise NotFoundError("Club")

    if transfer_body.to_club_id == player.club_id:
        raise ValidationError("Player is already in this club")

    transfer = await sql_transfer_player(
        player,
        transfer_body.to_club_id,
        transfer_body.transfer_date or datetime_utc.now(),
        transfer_body.notes,
    )
    return SingleTransferResponse(data=transfer)


@router.get("/players/{player_id}/club-history", response_model=ClubPeriodsResponse)
async def get_club_history(
    player_id: PlayerId, _: AdminPublic = Depends(admin_authenticated)
) -> ClubPeriodsResponse:
    if await get_player_by_id(player_id) is None:
        raise NotFoundError("Player")

    return ClubPeriodsResponse(data=await get_club_periods(player_id))
