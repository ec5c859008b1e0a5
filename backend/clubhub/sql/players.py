from typing import Any

from heliclockter import datetime_utc

from clubhub.database import database
from clubhub.models.db.player import (
    Player,
    PlayerBody,
    PlayerInsertable,
    PlayerRole,
    PlayerUpdateBody,
    PlayerWithClub,
)
from clubhub.schema import players
from clubhub.utils.id_types import ClubId, PlayerId
from clubhub.utils.pagination import Pagination
from clubhub.utils.types import assert_some

PLAYER_WITH_CLUB_QUERY = """
    SELECT
        p.*,
        c.name AS club_name,
        c.logo AS club_logo,
        COALESCE(
            (
                SELECT array_agg(pr.role::text ORDER BY pr.role)
                FROM player_roles pr
                WHERE pr.player_id = p.id
            ),
            ARRAY[]::text[]
        ) AS roles
    FROM players p
    LEFT JOIN clubs c ON c.id = p.club_id
"""


def _player_filters(
    club_id: ClubId | None,
    free_agents_only: bool,
    search: str | None,
    role: PlayerRole | None,
) -> tuple[str, dict[str, Any]]:
    conditions = ["TRUE"]
    params: dict[str, Any] = {}

    if club_id is not None:
        conditions.append("p.club_id = :club_id")
        params["club_id"] = club_id

    if free_agents_only:
        conditions.append("p.club_id IS NULL")

    if search:
        conditions.append(
            "(p.name ILIKE :search OR p.email ILIKE :search OR p.place ILIKE :search)"
        )
        params["search"] = f"%{search}%"

    if role is not None:
        conditions.append(
            "EXISTS (SELECT 1 FROM player_roles pr WHERE pr.player_id = p.id AND pr.role = :role)"
        )
        params["role"] = role.value

    return " AND ".join(conditions), params


async def get_players(
    *,
    club_id: ClubId | None = None,
    free_agents_only: bool = False,
    search: str | None = None,
    role: PlayerRole | None = None,
    pagination: Pagination | None = None,
) -> list[PlayerWithClub]:
    where, params = _player_filters(club_id, free_agents_only, search, role)
    query = f"{PLAYER_WITH_CLUB_QUERY} WHERE {where} ORDER BY p.name ASC"

    if pagination is not None:
        query += " LIMIT :limit OFFSET :offset"
        params = {**params, "limit": pagination.limit, "offset": pagination.offset}

    result = await database.fetch_all(query=query, values=params)
    return [PlayerWithClub.model_validate(dict(x._mapping)) for x in result]


async def get_player_count(
    *,
    club_id: ClubId | None = None,
    free_agents_only: bool = False,
    search: str | None = None,
    role: PlayerRole | None = None,
) -> int:
    where, params = _player_filters(club_id, free_agents_only, search, role)
    query = f"SELECT count(*) FROM players p WHERE {where}"
    return int(await database.fetch_val(query=query, values=params))


async def get_player_by_id(player_id: PlayerId) -> PlayerWithClub | None:
    query = f"{PLAYER_WITH_CLUB_QUERY} WHERE p.id = :player_id"
    result = await database.fetch_one(query=query, values={"player_id": player_id})
    return PlayerWithClub.model_validate(dict(result._mapping)) if result is not None else None


async def get_player_by_email(email: str) -> Player | None:
    query = f"{PLAYER_WITH_CLUB_QUERY} WHERE lower(p.email) = lower(:email) LIMIT 1"
    result = await database.fetch_one(query=query, values={"email": email})
    return Player.model_validate(dict(result._mapping)) if result is not None else None


async def get_players_by_ids(player_ids: list[PlayerId]) -> list[PlayerWithClub]:
    query = f"{PLAYER_WITH_CLUB_QUERY} WHERE p.id = any(:player_ids) ORDER BY p.name ASC"
    result = await database.fetch_all(query=query, values={"player_ids": player_ids})
    return [PlayerWithClub.model_validate(dict(x._mapping)) for x in result]


async def set_player_roles(player_id: PlayerId, roles: list[PlayerRole]) -> None:
    await database.execute(
        "DELETE FROM player_roles WHERE player_id = :player_id",
        values={"player_id": player_id},
    )
    for role in dict.fromkeys(roles):
        await database.execute(
            """
            INSERT INTO player_roles (player_id, role, created)
            VALUES (:player_id, :role, :created)
            ON CONFLICT (player_id, role) DO NOTHING
            """,
            values={"player_id": player_id, "role": role.value, "created": datetime_utc.now()},
        )


async def sql_create_player(player: PlayerBody, club_id: ClubId | None) -> PlayerWithClub:
    now = datetime_utc.now()
    roles = player.roles_with_player() if club_id is not None else [PlayerRole.PLAYER]

    async with database.transaction():
        new_id = await database.execute(
            query=players.insert(),
            values=PlayerInsertable(
                **player.model_dump(exclude={"roles"}),
                club_id=club_id,
                created=now,
                updated=now,
            ).model_dump(),
        )
        player_id = PlayerId(new_id)
        await set_player_roles(player_id, roles)
        await open_club_period(player_id, club_id, now)

    return assert_some(await get_player_by_id(player_id))


async def sql_update_player(player: PlayerWithClub, body: PlayerUpdateBody) -> PlayerWithClub:
    values = body.model_dump(exclude_unset=True, exclude={"roles"})

    async with database.transaction():
        await database.execute(
            query=players.update().where(players.c.id == player.id),
            values={**values, "updated": datetime_utc.now()},
        )
        if body.roles is not None:
            roles = list(body.roles)
            if PlayerRole.PLAYER not in roles:
                roles.append(PlayerRole.PLAYER)
            await set_player_roles(player.id, roles)

    return assert_some(await get_player_by_id(player.id))


async def sql_update_player_photo(player_id: PlayerId, photo: str | None) -> None:
    await database.execute(
        query=players.update().where(players.c.id == player_id),
        values={"photo": photo, "updated": datetime_utc.now()},
    )


async def sql_set_player_club(player_id: PlayerId, club_id: ClubId | None) -> None:
    await database.execute(
        query=players.update().where(players.c.id == player_id),
        values={"club_id": club_id, "updated": datetime_utc.now()},
    )


async def open_club_period(
    player_id: PlayerId, club_id: ClubId | None, joined_at: datetime_utc
) -> None:
    await database.execute(
        """
        INSERT INTO player_club_stats (player_id, club_id, joined_at)
        VALUES (:player_id, :club_id, :joined_at)
        """,
        values={"player_id": player_id, "club_id": club_id, "joined_at": joined_at},
    )


async def close_open_club_period(player_id: PlayerId, left_at: datetime_utc) -> None:
    await database.execute(
        """
        UPDATE player_club_stats
        SET left_at = :left_at
        WHERE player_id = :player_id
        AND left_at IS NULL
        """,
        values={"player_id": player_id, "left_at": left_at},
    )


async def sql_delete_player(player_id: PlayerId) -> None:
    query = "DELETE FROM players WHERE id = :player_id"
    await database.execute(query=query, values={"player_id": player_id})
