from fastapi import APIRouter, Depends
from heliclockter import datetime_utc

from clubhub.config import config
from clubhub.logic.ranking.leaderboard import (
    get_player_leaderboard,
    get_team_leaderboard,
    get_tournament_leaderboard,
    public_tournament_player_sort_key,
)
from clubhub.logic.statistics import get_template_for_tournament
from clubhub.models.db.tournament import TournamentStatus, TournamentWithCounts
from clubhub.models.leaderboard import (
    PublicClubDetail,
    PublicPlayerDetail,
    PublicTournament,
    PublicTournamentDetail,
)
from clubhub.routes.models import (
    ClubsResponse,
    MatchesResponse,
    PageInfo,
    PaginatedPublicPlayers,
    PaginatedPublicTournaments,
    PlayerLeaderboardResponse,
    PublicClubResponse,
    PublicPlayerResponse,
    PublicPlayersResponse,
    PublicTournamentResponse,
    PublicTournamentsResponse,
    SingleMatchResponse,
    TeamLeaderboardResponse,
)
from clubhub.sql.clubs import get_club_by_id, get_clubs
from clubhub.sql.matches import (
    get_match_with_results,
    get_matches_with_results,
    get_recent_results_of_player,
)
from clubhub.sql.players import get_player_by_id, get_player_count, get_players
from clubhub.sql.stats import get_stats_of_player
from clubhub.sql.tournaments import (
    get_tournament_by_id,
    get_tournament_count,
    get_tournament_with_counts,
    get_tournaments,
)
from clubhub.utils.cache import (
    CACHE_TTL_LONG_S,
    CACHE_TTL_MEDIUM_S,
    CACHE_TTL_SHORT_S,
    CACHE_TTL_VERY_LONG_S,
    CacheKeys,
    cached,
)
from clubhub.utils.errors import NotFoundError
from clubhub.utils.id_types import ClubId, MatchId, PlayerId, TournamentId
from clubhub.utils.pagination import PaginationPublic

router = APIRouter(prefix=f"{config.api_prefix}/public")


def to_public_tournament(tournament: TournamentWithCounts, now: datetime_utc) -> PublicTournament:
    return PublicTournament(**tournament.model_dump(), status=tournament.status_at(now))


async def check_tournament_exists(tournament_id: TournamentId) -> None:
    if await get_tournament_by_id(tournament_id) is None:
        raise NotFoundError("Tournament")


@router.get("/tournaments", response_model=PublicTournamentsResponse)
async def public_tournaments(
    status: TournamentStatus | None = None,
    pagination: PaginationPublic = Depends(),
) -> PublicTournamentsResponse:
    async def load() -> PublicTournamentsResponse:
        now = datetime_utc.now()
        tournaments = await get_tournaments(status=status, pagination=pagination)
        total = await get_tournament_count(status=status)
        return PublicTournamentsResponse(
            data=PaginatedPublicTournaments(
                tournaments=[to_public_tournament(tournament, now) for tournament in tournaments],
                pagination=PageInfo.build(pagination.page, pagination.page_size, total),
            )
        )

    key = CacheKeys.tournaments(
        status=status, page=pagination.page, page_size=pagination.page_size
    )
    return await cached(key, CACHE_TTL_MEDIUM_S, load)


@router.get("/tournaments/{tournament_id}", response_model=PublicTournamentResponse)
async def public_tournament(tournament_id: TournamentId) -> PublicTournamentResponse:
    async def load() -> PublicTournamentResponse | None:
        tournament = await get_tournament_with_counts(tournament_id)
        if tournament is None:
            return None

        template = await get_template_for_tournament(tournament)
        return PublicTournamentResponse(
            data=PublicTournamentDetail(
                tournament=to_public_tournament(tournament, datetime_utc.now()),
                stages=template.stage_points if template is not None else [],
            )
        )

    response = await cached(CacheKeys.tournament(tournament_id), CACHE_TTL_LONG_S, load)
    if response is None:
        raise NotFoundError("Tournament")
    return response


@router.get("/tournaments/{tournament_id}/matches", response_model=MatchesResponse)
async def public_tournament_matches(tournament_id: TournamentId) -> MatchesResponse:
    await check_tournament_exists(tournament_id)

    async def load() -> MatchesResponse:
        return MatchesResponse(data=await get_matches_with_results(tournament_id))

    return await cached(CacheKeys.tournament_matches(tournament_id), CACHE_TTL_SHORT_S, load)


@router.get("/tournaments/{tournament_id}/leaderboard", response_model=PlayerLeaderboardResponse)
async def public_tournament_leaderboard(tournament_id: TournamentId) -> PlayerLeaderboardResponse:
    await check_tournament_exists(tournament_id)

    async def load() -> PlayerLeaderboardResponse:
        leaderboard = await get_tournament_leaderboard(
            tournament_id, key=public_tournament_player_sort_key
        )
        return PlayerLeaderboardResponse(data=leaderboard)

    return await cached(CacheKeys.tournament_leaderboard(tournament_id), CACHE_TTL_SHORT_S, load)


@router.get("/players", response_model=PublicPlayersResponse)
async def public_players(
    club_id: ClubId | None = None,
    free_agents: bool = False,
    search: str | None = None,
    pagination: PaginationPublic = Depends(),
) -> PublicPlayersResponse:
    async def load() -> PublicPlayersResponse:
        filters = {"club_id": club_id, "free_agents_only": free_agents, "search": search}
        total = await get_player_count(**filters)
        return PublicPlayersResponse(
            data=PaginatedPublicPlayers(
                players=await get_players(**filters, pagination=pagination),
                pagination=PageInfo.build(pagination.page, pagination.page_size, total),
            )
        )

    key = CacheKeys.players(
        club_id=club_id,
        free_agents=free_agents,
        search=search,
        page=pagination.page,
        page_size=pagination.page_size,
    )
    return await cached(key, CACHE_TTL_MEDIUM_S, load)


@router.get("/players/{player_id}", response_model=PublicPlayerResponse)
async def public_player(player_id: PlayerId) -> PublicPlayerResponse:
    async def load() -> PublicPlayerResponse | None:
        player = await get_player_by_id(player_id)
        if player is None:
            return None

        return PublicPlayerResponse(
            data=PublicPlayerDetail(
                player=player,
                tournament_stats=await get_stats_of_player(player_id),
                recent_results=await get_recent_results_of_player(player_id),
            )
        )

    response = await cached(CacheKeys.player(player_id), CACHE_TTL_MEDIUM_S, load)
    if response is None:
        raise NotFoundError("Player")
    return response


@router.get("/clubs", response_model=ClubsResponse)
async def public_clubs() -> ClubsResponse:
    async def load() -> ClubsResponse:
        return ClubsResponse(data=await get_clubs())

    return await cached(CacheKeys.clubs(), CACHE_TTL_VERY_LONG_S, load)


@router.get("/clubs/{club_id}", response_model=PublicClubResponse)
async def public_club(club_id: ClubId) -> PublicClubResponse:
    async def load() -> PublicClubResponse | None:
        club = await get_club_by_id(club_id)
        if club is None:
            return None

        return PublicClubResponse(
            data=PublicClubDetail(
                club=club,
                players=await get_players(club_id=club_id),
                tournaments=await get_tournaments(club_id=club_id),
            )
        )

    response = await cached(CacheKeys.club(club_id), CACHE_TTL_LONG_S, load)
    if response is None:
        raise NotFoundError("Club")
    return response


@router.get("/matches/{match_id}", response_model=SingleMatchResponse)
async def public_match(match_id: MatchId) -> SingleMatchResponse:
    async def load() -> SingleMatchResponse | None:
        match = await get_match_with_results(match_id)
        return SingleMatchResponse(data=match) if match is not None else None

    response = await cached(CacheKeys.match(match_id), CACHE_TTL_MEDIUM_S, load)
    if response is None:
        raise NotFoundError("Match")
    return response


@router.get("/leaderboard/players", response_model=PlayerLeaderboardResponse)
async def public_player_leaderboard(
    tournament: TournamentId | None = None,
) -> PlayerLeaderboardResponse:
    async def load() -> PlayerLeaderboardResponse:
        return PlayerLeaderboardResponse(data=await get_player_leaderboard(tournament))

    return await cached(CacheKeys.player_leaderboard(tournament), CACHE_TTL_SHORT_S, load)


@router.get("/leaderboard/teams", response_model=TeamLeaderboardResponse)
async def public_team_leaderboard(
    tournament: TournamentId | None = None,
) -> TeamLeaderboardResponse:
    async def load() -> TeamLeaderboardResponse:
        return TeamLeaderboardResponse(data=await get_team_leaderboard(tournament))

    return await cached(CacheKeys.team_leaderboard(tournament), CACHE_TTL_SHORT_S, load)
