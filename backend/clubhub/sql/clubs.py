from typing import Any

from heliclockter import datetime_utc

from clubhub.database import database
from clubhub.models.db.club import Club, ClubBody, ClubInsertable, ClubUpdateBody, ClubWithCounts
from clubhub.schema import clubs
from clubhub.utils.db import fetch_one_parsed
from clubhub.utils.id_types import ClubId
from clubhub.utils.types import assert_some

CLUB_WITH_COUNTS_QUERY = """
    SELECT
        c.*,
        (SELECT count(*) FROM players p WHERE p.club_id = c.id) AS player_count,
        (SELECT count(*) FROM tournaments t WHERE t.club_id = c.id) AS tournament_count
    FROM clubs c
"""


async def get_clubs(search: str | None = None) -> list[ClubWithCounts]:
    query = f"{CLUB_WITH_COUNTS_QUERY} WHERE TRUE"
    params: dict[str, Any] = {}

    if search:
        query += " AND (c.name ILIKE :search OR c.description ILIKE :search)"
        params["search"] = f"%{search}%"

    query += " ORDER BY c.name ASC"
    result = await database.fetch_all(query=query, values=params)
    return [ClubWithCounts.model_validate(dict(x._mapping)) for x in result]


async def get_club_by_id(club_id: ClubId) -> Club | None:
    return await fetch_one_parsed(database, Club, clubs.select().where(clubs.c.id == club_id))


async def get_club_with_counts(club_id: ClubId) -> ClubWithCounts | None:
    query = f"{CLUB_WITH_COUNTS_QUERY} WHERE c.id = :club_id"
    result = await database.fetch_one(query=query, values={"club_id": club_id})
    return ClubWithCounts.model_validate(dict(result._mapping)) if result is not None else None


async def sql_create_club(club: ClubBody) -> Club:
    now = datetime_utc.now()
    new_id = await database.execute(
        query=clubs.insert(),
        values=ClubInsertable(**club.model_dump(), created=now, updated=now).model_dump(),
    )
    return assert_some(await get_club_by_id(ClubId(new_id)))


async def sql_update_club(club_id: ClubId, club: ClubUpdateBody) -> Club:
    values = club.model_dump(exclude_unset=True)
    await database.execute(
        query=clubs.update().where(clubs.c.id == club_id),
        values={**values, "updated": datetime_utc.now()},
    )
    return assert_some(await get_club_by_id(club_id))


async def sql_update_club_logo(club_id: ClubId, logo: str | None) -> None:
    await database.execute(
        query=clubs.update().where(clubs.c.id == club_id),
        values={"logo": logo, "updated": datetime_utc.now()},
    )


async def sql_delete_club(club_id: ClubId) -> None:
    query = "DELETE FROM clubs WHERE id = :club_id"
    await database.execute(query=query, values={"club_id": club_id})
