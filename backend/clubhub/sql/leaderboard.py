from typing import Any

from clubhub.database import database
from clubhub.utils.id_types import TournamentId


def _tournament_filter(tournament_id: TournamentId | None) -> tuple[str, dict[str, Any]]:
    if tournament_id is None:
        return "", {}
    return "AND m.tournament_id = :tournament_id", {"tournament_id": tournament_id}


async def get_player_result_totals(tournament_id: TournamentId | None) -> list[dict[str, Any]]:
    tournament_filter, params = _tournament_filter(tournament_id)
    query = f"""
        SELECT
            p.id AS player_id,
            p.name AS player_name,
            p.photo AS player_photo,
            c.id AS club_id,
            c.name AS club_name,
            count(mr.id) AS matches_played,
            count(*) FILTER (WHERE mr.outcome = 'WIN') AS wins,
            count(*) FILTER (WHERE mr.outcome = 'DRAW') AS draws,
            count(*) FILTER (WHERE mr.outcome = 'LOSS') AS losses,
            COALESCE(SUM(mr.goals_scored), 0) AS goals_scored,
            COALESCE(SUM(mr.goals_conceded), 0) AS goals_conceded,
            COALESCE(SUM(mr.points_earned), 0) AS total_points,
            COALESCE(SUM(mr.conditional_points), 0) AS conditional_points
        FROM match_results mr
        JOIN matches m ON m.id = mr.match_id
        JOIN players p ON p.id = mr.player_id
        LEFT JOIN clubs c ON c.id = p.club_id
        WHERE TRUE
        {tournament_filter}
        GROUP BY p.id, c.id
        ORDER BY p.id ASC
        """
    result = await database.fetch_all(query=query, values=params)
    return [dict(x._mapping) for x in result]


async def get_club_result_totals(tournament_id: TournamentId | None) -> list[dict[str, Any]]:
    tournament_filter, params = _tournament_filter(tournament_id)
    query = f"""
        SELECT
            c.id AS club_id,
            c.name AS club_name,
            c.logo AS club_logo,
            (SELECT count(*) FROM players cp WHERE cp.club_id = c.id) AS player_count,
            count(mr.id) AS matches_played,
            count(*) FILTER (WHERE mr.outcome = 'WIN') AS wins,
            count(*) FILTER (WHERE mr.outcome = 'DRAW') AS draws,
            count(*) FILTER (WHERE mr.outcome = 'LOSS') AS losses,
            COALESCE(SUM(mr.goals_scored), 0) AS goals_scored,
            COALESCE(SUM(mr.goals_conceded), 0) AS goals_conceded,
            COALESCE(SUM(mr.points_earned), 0) AS total_points
        FROM clubs c
        JOIN players p ON p.club_id = c.id
        JOIN match_results mr ON mr.player_id = p.id
        JOIN matches m ON m.id = mr.match_id
        WHERE TRUE
        {tournament_filter}
        GROUP BY c.id
        ORDER BY c.id ASC
        """
    result = await database.fetch_all(query=query, values=params)
    return [dict(x._mapping) for x in result]
