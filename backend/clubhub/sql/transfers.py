from heliclockter import datetime_utc

from clubhub.database import database
from clubhub.models.db.player import PlayerWithClub
from clubhub.models.db.transfer import (
    PlayerClubStats,
    PlayerTransferInsertable,
    PlayerTransferWithNames,
)
from clubhub.schema import player_transfers
from clubhub.sql.players import close_open_club_period, open_club_period, sql_set_player_club
from clubhub.utils.db import fetch_all_parsed
from clubhub.utils.id_types import ClubId, PlayerId, PlayerTransferId
from clubhub.utils.types import assert_some

_TRANSFER_WITH_NAMES = """
    SELECT
        pt.*,
        p.name AS player_name,
        fc.name AS from_club_name,
        tc.name AS to_club_name
    FROM player_transfers pt
    JOIN players p ON p.id = pt.player_id
    LEFT JOIN clubs fc ON fc.id = pt.from_club_id
    LEFT JOIN clubs tc ON tc.id = pt.to_club_id
"""


async def get_transfers(player_id: PlayerId | None = None) -> list[PlayerTransferWithNames]:
    query = _TRANSFER_WITH_NAMES
    params: dict[str, PlayerId] = {}
    if player_id is not None:
        query += " WHERE pt.player_id = :player_id"
        params["player_id"] = player_id

    query += " ORDER BY pt.transfer_date DESC, pt.id DESC"
    result = await database.fetch_all(query=query, values=params)
    return [PlayerTransferWithNames.model_validate(dict(x._mapping)) for x in result]


async def get_transfer_by_id(transfer_id: PlayerTransferId) -> PlayerTransferWithNames | None:
    query = f"{_TRANSFER_WITH_NAMES} WHERE pt.id = :transfer_id"
    result = await database.fetch_one(query=query, values={"transfer_id": transfer_id})
    return PlayerTransferWithNames.model_validate(dict(result._mapping)) if result else None


async def get_club_periods(player_id: PlayerId) -> list[PlayerClubStats]:
    query = """
        SELECT *
        FROM player_club_stats
        WHERE player_id = :player_id
        ORDER BY joined_at ASC, id ASC
        """
    return await fetch_all_parsed(database, PlayerClubStats, query, {"player_id": player_id})


async def sql_transfer_player(
    player: PlayerWithClub,
    to_club_id: ClubId | None,
    transfer_date: datetime_utc,
    notes: str | None,
) -> PlayerTransferWithNames:
    """Move a player to another club (or into free agency) and record the move."""
    async with database.transaction():
        await close_open_club_period(player.id, transfer_date)
        new_id = await database.execute(
            query=player_transfers.insert(),
            values=PlayerTransferInsertable(
                player_id=player.id,
                from_club_id=player.club_id,
                to_club_id=to_club_id,
                transfer_date=transfer_date,
                notes=notes,
            ).model_dump(),
        )
        await sql_set_player_club(player.id, to_club_id)
        await open_club_period(player.id, to_club_id, transfer_date)

    return assert_some(await get_transfer_by_id(PlayerTransferId(new_id)))
