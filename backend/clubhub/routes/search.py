from enum import auto

from fastapi import APIRouter, Depends, Query

from clubhub.config import config
from clubhub.models.db.admin import AdminPublic
from clubhub.models.leaderboard import SearchResults
from clubhub.routes.auth import admin_authenticated
from clubhub.routes.models import SearchResponse
from clubhub.sql.search import search_clubs, search_players
from clubhub.utils.types import EnumAutoStr

router = APIRouter(prefix=config.api_prefix)


class SearchType(EnumAutoStr):
    club = auto()
    player = auto()


@router.get("/search", response_model=SearchResponse)
async def search(
    q: str = "",
    type_: SearchType | None = Query(default=None, alias="type"),
    _: AdminPublic = Depends(admin_authenticated),
) -> SearchResponse:
    search_term = q.strip()
    if search_term == "":
        return SearchResponse(data=SearchResults(clubs=[], players=[]))

    return SearchResponse(
        data=SearchResults(
            clubs=await search_clubs(search_term) if type_ in (None, SearchType.club) else [],
            players=await search_players(search_term) if type_ in (None, SearchType.player) else [],
        )
    )
