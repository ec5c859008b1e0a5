from typing import Any

from heliclockter import datetime_utc

from clubhub.database import database
from clubhub.models.db.player import PlayerWithClub
from clubhub.models.db.tournament import (
    ParticipantWithPlayer,
    Tournament,
    TournamentBody,
    TournamentInsertable,
    TournamentStatus,
    TournamentUpdateBody,
    TournamentWithCounts,
)
from clubhub.schema import tournaments
from clubhub.sql.players import get_players_by_ids
from clubhub.utils.db import fetch_one_parsed
from clubhub.utils.id_types import ClubId, PlayerId, TournamentId
from clubhub.utils.pagination import Pagination
from clubhub.utils.types import assert_some

_TOURNAMENT_WITH_COUNTS = """
    SELECT
        t.*,
        c.name AS club_name,
        pst.name AS point_system_template_name,
        (
            SELECT count(*)
            FROM tournament_participants tp
            WHERE tp.tournament_id = t.id
        ) AS participant_count,
        (SELECT count(*) FROM matches m WHERE m.tournament_id = t.id) AS match_count
    FROM tournaments t
    LEFT JOIN clubs c ON c.id = t.club_id
    LEFT JOIN point_system_templates pst ON pst.id = t.point_system_template_id
"""

_STATUS_FILTERS = {
    TournamentStatus.UPCOMING: "t.start_date > :now",
    TournamentStatus.ONGOING: (
        "t.start_date <= :now AND (t.end_date IS NULL OR t.end_date >= :now)"
    ),
    TournamentStatus.COMPLETED: "t.end_date < :now",
}


def _tournament_filters(
    club_id: ClubId | None,
    search: str | None,
    status: TournamentStatus | None,
) -> tuple[str, dict[str, Any]]:
    conditions = ["TRUE"]
    params: dict[str, Any] = {}

    if club_id is not None:
        conditions.append("t.club_id = :club_id")
        params["club_id"] = club_id

    if search:
        conditions.append("t.name ILIKE :search")
        params["search"] = f"%{search}%"

    if status is not None:
        conditions.append(_STATUS_FILTERS[status])
        params["now"] = datetime_utc.now()

    return " AND ".join(conditions), params


async def get_tournaments(
    *,
    club_id: ClubId | None = None,
    search: str | None = None,
    status: TournamentStatus | None = None,
    pagination: Pagination | None = None,
) -> list[TournamentWithCounts]:
    where, params = _tournament_filters(club_id, search, status)
    query = f"{_TOURNAMENT_WITH_COUNTS} WHERE {where} ORDER BY t.start_date DESC, t.id DESC"

    if pagination is not None:
        query += " LIMIT :limit OFFSET :offset"
        params = {**params, "limit": pagination.limit, "offset": pagination.offset}

    result = await database.fetch_all(query=query, values=params)
    return [TournamentWithCounts.model_validate(dict(x._mapping)) for x in result]


async def get_tournament_count(
    *,
    club_id: ClubId | None = None,
    search: str | None = None,
    status: TournamentStatus | None = None,
) -> int:
    where, params = _tournament_filters(club_id, search, status)
    query = f"SELECT count(*) FROM tournaments t WHERE {where}"
    return int(await database.fetch_val(query=query, values=params))


async def get_tournament_by_id(tournament_id: TournamentId) -> Tournament | None:
    return await fetch_one_parsed(
        database, Tournament, tournaments.select().where(tournaments.c.id == tournament_id)
    )


async def get_tournament_with_counts(tournament_id: TournamentId) -> TournamentWithCounts | None:
    query = f"{_TOURNAMENT_WITH_COUNTS} WHERE t.id = :tournament_id"
    result = await database.fetch_one(query=query, values={"tournament_id": tournament_id})
    if result is None:
        return None
    return TournamentWithCounts.model_validate(dict(result._mapping))


async def sql_create_tournament(tournament: TournamentBody) -> Tournament:
    now = datetime_utc.now()
    new_id = await database.execute(
        query=tournaments.insert(),
        values=TournamentInsertable(
            **tournament.model_dump(), created=now, updated=now
        ).model_dump(),
    )
    return assert_some(await get_tournament_by_id(TournamentId(new_id)))


async def sql_update_tournament(
    tournament_id: TournamentId, tournament: TournamentUpdateBody
) -> Tournament:
    values = tournament.model_dump(exclude_unset=True)
    await database.execute(
        query=tournaments.update().where(tournaments.c.id == tournament_id),
        values={**values, "updated": datetime_utc.now()},
    )
    return assert_some(await get_tournament_by_id(tournament_id))


async def sql_delete_tournament(tournament_id: TournamentId) -> None:
    query = "DELETE FROM tournaments WHERE id = :tournament_id"
    await database.execute(query=query, values={"tournament_id": tournament_id})


async def get_participant_player_ids(tournament_id: TournamentId) -> list[PlayerId]:
    query = """
        SELECT player_id
        FROM tournament_participants
        WHERE tournament_id = :tournament_id
        ORDER BY player_id ASC
        """
    result = await database.fetch_all(query=query, values={"tournament_id": tournament_id})
    return [PlayerId(x._mapping["player_id"]) for x in result]


async def get_participants(tournament_id: TournamentId) -> list[ParticipantWithPlayer]:
    query = """
        SELECT *
        FROM tournament_participants
        WHERE tournament_id = :tournament_id
        ORDER BY created ASC, id ASC
        """
    rows = [
        dict(x._mapping)
        for x in await database.fetch_all(query=query, values={"tournament_id": tournament_id})
    ]
    players_by_id: dict[PlayerId, PlayerWithClub] = {
        player.id: player
        for player in await get_players_by_ids([row["player_id"] for row in rows])
    }
    return [
        ParticipantWithPlayer.model_validate({**row, "player": players_by_id[row["player_id"]]})
        for row in rows
        if row["player_id"] in players_by_id
    ]


async def sql_add_participants(tournament_id: TournamentId, player_ids: list[PlayerId]) -> int:
    added = 0
    async with database.transaction():
        for player_id in dict.fromkeys(player_ids):
            new_id = await database.fetch_val(
                """
                INSERT INTO tournament_participants (tournament_id, player_id, created)
                VALUES (:tournament_id, :player_id, :created)
                ON CONFLICT (tournament_id, player_id) DO NOTHING
                RETURNING id
                """,
                values={
                    "tournament_id": tournament_id,
                    "player_id": player_id,
                    "created": datetime_utc.now(),
                },
            )
            if new_id is not None:
                added += 1
    return added


async def sql_remove_participant(tournament_id: TournamentId, player_id: PlayerId) -> int:
    """
    Remove a participant together with their results and statistics in this tournament.

    Returns the number of match results that were deleted.
    """
    async with database.transaction():
        deleted_results = await database.fetch_val(
            """
            WITH deleted AS (
                DELETE FROM match_results mr
                USING matches m
                WHERE m.id = mr.match_id
                AND m.tournament_id = :tournament_id
                AND mr.player_id = :player_id
                RETURNING mr.id
            )
            SELECT count(*) FROM deleted
            """,
            values={"tournament_id": tournament_id, "player_id": player_id},
        )
        await database.execute(
            """
            DELETE FROM tournament_player_stats
            WHERE tournament_id = :tournament_id
            AND player_id = :player_id
            """,
            values={"tournament_id": tournament_id, "player_id": player_id},
        )
        await database.execute(
            """
            DELETE FROM tournament_participants
            WHERE tournament_id = :tournament_id
            AND player_id = :player_id
            """,
            values={"tournament_id": tournament_id, "player_id": player_id},
        )
    return int(deleted_results or 0)


async def is_participant(tournament_id: TournamentId, player_id: PlayerId) -> bool:
    query = """
        SELECT 1
        FROM tournament_participants
        WHERE tournament_id = :tournament_id
        AND player_id = :player_id
        """
    result = await database.fetch_val(
        query=query, values={"tournament_id": tournament_id, "player_id": player_id}
    )
    return result is not None
