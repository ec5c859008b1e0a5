from heliclockter import datetime_utc

from clubhub.database import database
from clubhub.models.db.stats import (
    PlayerStatsTotals,
    PlayerTournamentStats,
    TournamentPlayerStatsWithPlayer,
)
from clubhub.utils.id_types import PlayerId, TournamentId

_STATS_RECALC_LOCK_SALT = 3_141_592_653_589_793_238


def _stats_recalc_lock_key(tournament_id: TournamentId) -> int:
    # pg advisory locks take a signed bigint
    return (_STATS_RECALC_LOCK_SALT + int(tournament_id)) % (2**63)


async def acquire_stats_advisory_lock(tournament_id: TournamentId) -> None:
    await database.execute(
        "SELECT pg_advisory_xact_lock(:lock_key)",
        values={"lock_key": _stats_recalc_lock_key(tournament_id)},
    )


async def upsert_player_stats(
    tournament_id: TournamentId, player_id: PlayerId, totals: PlayerStatsTotals
) -> None:
    """
    Write the rollup of one player in one tournament.

    Rows whose aggregates did not change are left untouched, including their `updated` column.
    """
    await database.execute(
        """
        INSERT INTO tournament_player_stats (
            tournament_id,
            player_id,
            matches_played,
            wins,
            draws,
            losses,
            goals_scored,
            goals_conceded,
            total_points,
            conditional_points,
            updated
        )
        VALUES (
            :tournament_id,
            :player_id,
            :matches_played,
            :wins,
            :draws,
            :losses,
            :goals_scored,
            :goals_conceded,
            :total_points,
            :conditional_points,
            :updated
        )
        ON CONFLICT (tournament_id, player_id)
        DO UPDATE
        SET
            matches_played = EXCLUDED.matches_played,
            wins = EXCLUDED.wins,
            draws = EXCLUDED.draws,
            losses = EXCLUDED.losses,
            goals_scored = EXCLUDED.goals_scored,
            goals_conceded = EXCLUDED.goals_conceded,
            total_points = EXCLUDED.total_points,
            conditional_points = EXCLUDED.conditional_points,
            updated = EXCLUDED.updated
        WHERE (
            tournament_player_stats.matches_played,
            tournament_player_stats.wins,
            tournament_player_stats.draws,
            tournament_player_stats.losses,
            tournament_player_stats.goals_scored,
            tournament_player_stats.goals_conceded,
            tournament_player_stats.total_points,
            tournament_player_stats.conditional_points
        ) IS DISTINCT FROM (
            EXCLUDED.matches_played,
            EXCLUDED.wins,
            EXCLUDED.draws,
            EXCLUDED.losses,
            EXCLUDED.goals_scored,
            EXCLUDED.goals_conceded,
            EXCLUDED.total_points,
            EXCLUDED.conditional_points
        )
        """,
        values={
            "tournament_id": tournament_id,
            "player_id": player_id,
            "updated": datetime_utc.now(),
            **totals.model_dump(),
        },
    )


async def get_tournament_player_stats(
    tournament_id: TournamentId,
) -> list[TournamentPlayerStatsWithPlayer]:
    query = """
        SELECT
            tps.*,
            p.name AS player_name,
            p.photo AS player_photo,
            c.name AS club_name
        FROM tournament_player_stats tps
        JOIN players p ON p.id = tps.player_id
        LEFT JOIN clubs c ON c.id = p.club_id
        WHERE tps.tournament_id = :tournament_id
        ORDER BY tps.total_points DESC, tps.goals_scored DESC, tps.wins DESC, p.name ASC
        """
    result = await database.fetch_all(query=query, values={"tournament_id": tournament_id})
    return [TournamentPlayerStatsWithPlayer.model_validate(dict(x._mapping)) for x in result]


async def get_stats_of_player(player_id: PlayerId) -> list[PlayerTournamentStats]:
    query = """
        SELECT tps.*, t.name AS tournament_name
        FROM tournament_player_stats tps
        JOIN tournaments t ON t.id = tps.tournament_id
        WHERE tps.player_id = :player_id
        ORDER BY t.start_date DESC
        """
    result = await database.fetch_all(query=query, values={"player_id": player_id})
    return [PlayerTournamentStats.model_validate(dict(x._mapping)) for x in result]
