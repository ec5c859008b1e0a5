from pydantic import BaseModel

from clubhub.models.db.club import Club, ClubWithCounts
from clubhub.models.db.match import MatchWithResults
from clubhub.models.db.player import PlayerWithClub
from clubhub.models.db.point_system import (
    ConditionalRule,
    FullPointSystemTemplate,
    PointSystemTemplateSummary,
    StagePoint,
)
from clubhub.models.db.stats import RecalculationSummary, TournamentPlayerStatsWithPlayer
from clubhub.models.db.tournament import (
    ParticipantRemoved,
    ParticipantsAdded,
    ParticipantWithPlayer,
    Tournament,
    TournamentWithCounts,
)
from clubhub.models.db.transfer import PlayerClubStats, PlayerTransferWithNames
from clubhub.models.leaderboard import (
    ClubHierarchy,
    PlayerLeaderboardRow,
    PublicClubDetail,
    PublicPlayerDetail,
    PublicTournament,
    PublicTournamentDetail,
    SearchResults,
    TeamLeaderboardRow,
)


class SuccessResponse(BaseModel):
    success: bool = True


class DataResponse[DataT](BaseModel):
    data: DataT


class PageInfo(BaseModel):
    page: int
    page_size: int
    total: int
    total_pages: int

    @classmethod
    def build(cls, page: int, page_size: int, total: int) -> "PageInfo":
        return cls(
            page=page,
            page_size=page_size,
            total=total,
            total_pages=(total + page_size - 1) // page_size,
        )


class ClubsResponse(DataResponse[list[ClubWithCounts]]):
    pass


class SingleClubResponse(DataResponse[Club]):
    pass


class ClubDetailResponse(DataResponse[ClubWithCounts]):
    pass


class ClubHierarchyResponse(DataResponse[ClubHierarchy]):
    pass


class PaginatedPlayers(BaseModel):
    count: int
    players: list[PlayerWithClub]


class PlayersResponse(DataResponse[PaginatedPlayers]):
    pass


class PlayerListResponse(DataResponse[list[PlayerWithClub]]):
    pass


class SinglePlayerResponse(DataResponse[PlayerWithClub]):
    pass


class TransfersResponse(DataResponse[list[PlayerTransferWithNames]]):
    pass


class SingleTransferResponse(DataResponse[PlayerTransferWithNames]):
    pass


class ClubPeriodsResponse(DataResponse[list[PlayerClubStats]]):
    pass


class TournamentsResponse(DataResponse[list[TournamentWithCounts]]):
    pass


class SingleTournamentResponse(DataResponse[Tournament]):
    pass


class TournamentDetailResponse(DataResponse[TournamentWithCounts]):
    pass


class ParticipantsResponse(DataResponse[list[ParticipantWithPlayer]]):
    pass


class ParticipantsAddedResponse(DataResponse[ParticipantsAdded]):
    pass


class ParticipantRemovedResponse(DataResponse[ParticipantRemoved]):
    pass


class StagesResponse(DataResponse[list[StagePoint]]):
    pass


class MatchesResponse(DataResponse[list[MatchWithResults]]):
    pass


class SingleMatchResponse(DataResponse[MatchWithResults]):
    pass


class PlayerStatsResponse(DataResponse[list[TournamentPlayerStatsWithPlayer]]):
    pass


class PlayerLeaderboardResponse(DataResponse[list[PlayerLeaderboardRow]]):
    pass


class TeamLeaderboardResponse(DataResponse[list[TeamLeaderboardRow]]):
    pass


class RecalculationResponse(DataResponse[RecalculationSummary]):
    pass


class PaginatedPointSystems(BaseModel):
    templates: list[PointSystemTemplateSummary]
    pagination: PageInfo


class PointSystemsResponse(DataResponse[PaginatedPointSystems]):
    pass


class SinglePointSystemResponse(DataResponse[FullPointSystemTemplate]):
    pass


class ConditionalRulesResponse(DataResponse[list[ConditionalRule]]):
    pass


class SingleConditionalRuleResponse(DataResponse[ConditionalRule]):
    pass


class SearchResponse(DataResponse[SearchResults]):
    pass


class PaginatedPublicTournaments(BaseModel):
    tournaments: list[PublicTournament]
    pagination: PageInfo


class PublicTournamentsResponse(DataResponse[PaginatedPublicTournaments]):
    pass


class PublicTournamentResponse(DataResponse[PublicTournamentDetail]):
    pass


class PaginatedPublicPlayers(BaseModel):
    players: list[PlayerWithClub]
    pagination: PageInfo


class PublicPlayersResponse(DataResponse[PaginatedPublicPlayers]):
    pass


class PublicPlayerResponse(DataResponse[PublicPlayerDetail]):
    pass


class PublicClubResponse(DataResponse[PublicClubDetail]):
    pass
