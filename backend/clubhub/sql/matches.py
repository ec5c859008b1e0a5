from typing import Any

from heliclockter import datetime_utc

from clubhub.database import database
from clubhub.models.db.match import (
    Match,
    MatchInsertable,
    MatchResult,
    MatchResultInsertable,
    MatchResultWithPlayer,
    MatchResultWithStage,
    MatchWithResults,
    ScoredResult,
)
from clubhub.models.leaderboard import RecentResult
from clubhub.schema import match_results, matches
from clubhub.utils.db import fetch_one_parsed
from clubhub.utils.id_types import MatchId, MatchResultId, PlayerId, StagePointId, TournamentId
from clubhub.utils.types import assert_some


async def get_match_by_id(match_id: MatchId) -> Match | None:
    return await fetch_one_parsed(database, Match, matches.select().where(matches.c.id == match_id))


async def _get_results_for_matches(match_ids: list[MatchId]) -> list[MatchResultWithPlayer]:
    query = """
        SELECT
            mr.*,
            p.name AS player_name,
            p.photo AS player_photo,
            c.name AS club_name
        FROM match_results mr
        JOIN players p ON p.id = mr.player_id
        LEFT JOIN clubs c ON c.id = p.club_id
        WHERE mr.match_id = any(:match_ids)
        ORDER BY mr.match_id ASC, mr.points_earned DESC, mr.id ASC
        """
    result = await database.fetch_all(query=query, values={"match_ids": match_ids})
    return [MatchResultWithPlayer.model_validate(dict(x._mapping)) for x in result]


async def get_matches_with_results(
    tournament_id: TournamentId | None = None, *, limit: int | None = None
) -> list[MatchWithResults]:
    query = """
        SELECT m.*, t.name AS tournament_name
        FROM matches m
        JOIN tournaments t ON t.id = m.tournament_id
        WHERE TRUE
        """
    params: dict[str, Any] = {}

    if tournament_id is not None:
        query += " AND m.tournament_id = :tournament_id"
        params["tournament_id"] = tournament_id

    query += " ORDER BY m.match_date DESC, m.id DESC"
    if limit is not None:
        query += " LIMIT :limit"
        params["limit"] = limit

    rows = [dict(x._mapping) for x in await database.fetch_all(query=query, values=params)]
    results = await _get_results_for_matches([row["id"] for row in rows])

    return [
        MatchWithResults.model_validate(
            {**row, "results": [result for result in results if result.match_id == row["id"]]}
        )
        for row in rows
    ]


async def get_match_with_results(match_id: MatchId) -> MatchWithResults | None:
    query = """
        SELECT m.*, t.name AS tournament_name
        FROM matches m
        JOIN tournaments t ON t.id = m.tournament_id
        WHERE m.id = :match_id
        """
    row = await database.fetch_one(query=query, values={"match_id": match_id})
    if row is None:
        return None

    return MatchWithResults.model_validate(
        {**dict(row._mapping), "results": await _get_results_for_matches([match_id])}
    )


async def get_player_ids_of_match(match_id: MatchId) -> list[PlayerId]:
    query = "SELECT player_id FROM match_results WHERE match_id = :match_id ORDER BY player_id"
    result = await database.fetch_all(query=query, values={"match_id": match_id})
    return [PlayerId(x._mapping["player_id"]) for x in result]


async def _insert_results(match_id: MatchId, results: list[ScoredResult]) -> None:
    now = datetime_utc.now()
    for result in results:
        await database.execute(
            query=match_results.insert(),
            values=MatchResultInsertable(
                **result.model_dump(), match_id=match_id, created=now
            ).model_dump(),
        )


async def sql_create_match(
    tournament_id: TournamentId,
    match_date: datetime_utc,
    stage_id: StagePointId | None,
    stage_name: str | None,
    results: list[ScoredResult],
) -> MatchWithResults:
    now = datetime_utc.now()

    async with database.transaction():
        new_id = await database.execute(
            query=matches.insert(),
            values=MatchInsertable(
                tournament_id=tournament_id,
                match_date=match_date,
                stage_id=stage_id,
                stage_name=stage_name,
                created=now,
                updated=now,
            ).model_dump(),
        )
        match_id = MatchId(new_id)
        await _insert_results(match_id, results)

    return assert_some(await get_match_with_results(match_id))


async def sql_update_match(
    match_id: MatchId,
    values: dict[str, Any],
    results: list[ScoredResult] | None,
) -> MatchWithResults:
    async with database.transaction():
        await database.execute(
            query=matches.update().where(matches.c.id == match_id),
            values={**values, "updated": datetime_utc.now()},
        )
        if results is not None:
            await database.execute(
                "DELETE FROM match_results WHERE match_id = :match_id",
                values={"match_id": match_id},
            )
            await _insert_results(match_id, results)

    return assert_some(await get_match_with_results(match_id))


async def sql_delete_match(match_id: MatchId) -> None:
    query = "DELETE FROM matches WHERE id = :match_id"
    await database.execute(query=query, values={"match_id": match_id})


async def get_results_in_tournament(tournament_id: TournamentId) -> list[MatchResultWithStage]:
    query = """
        SELECT mr.*, m.stage_id
        FROM match_results mr
        JOIN matches m ON m.id = mr.match_id
        WHERE m.tournament_id = :tournament_id
        ORDER BY mr.id ASC
        """
    result = await database.fetch_all(query=query, values={"tournament_id": tournament_id})
    return [MatchResultWithStage.model_validate(dict(x._mapping)) for x in result]


async def get_results_for_players(
    tournament_id: TournamentId, player_ids: list[PlayerId]
) -> list[MatchResult]:
    query = """
        SELECT mr.*
        FROM match_results mr
        JOIN matches m ON m.id = mr.match_id
        WHERE m.tournament_id = :tournament_id
        AND mr.player_id = any(:player_ids)
        ORDER BY mr.id ASC
        """
    result = await database.fetch_all(
        query=query, values={"tournament_id": tournament_id, "player_ids": player_ids}
    )
    return [MatchResult.model_validate(dict(x._mapping)) for x in result]


async def sql_update_result_points(
    result_id: MatchResultId, base_points: int, conditional_points: int
) -> None:
    await database.execute(
        """
        UPDATE match_results
        SET
            base_points = :base_points,
            conditional_points = :conditional_points,
            points_earned = :points_earned
        WHERE id = :result_id
        """,
        values={
            "result_id": result_id,
            "base_points": base_points,
            "conditional_points": conditional_points,
            "points_earned": base_points + conditional_points,
        },
    )


async def get_recent_results_of_player(player_id: PlayerId, limit: int = 10) -> list[RecentResult]:
    query = """
        SELECT
            m.id AS match_id,
            m.tournament_id,
            t.name AS tournament_name,
            m.match_date,
            mr.outcome,
            mr.goals_scored,
            mr.goals_conceded,
            mr.points_earned
        FROM match_results mr
        JOIN matches m ON m.id = mr.match_id
        JOIN tournaments t ON t.id = m.tournament_id
        WHERE mr.player_id = :player_id
        ORDER BY m.match_date DESC, m.id DESC
        LIMIT :limit
        """
    result = await database.fetch_all(query=query, values={"player_id": player_id, "limit": limit})
    return [RecentResult.model_validate(dict(x._mapping)) for x in result]
