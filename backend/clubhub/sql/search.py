from clubhub.database import database
from clubhub.models.db.club import ClubWithCounts
from clubhub.models.db.player import PlayerWithClub
from clubhub.sql.clubs import CLUB_WITH_COUNTS_QUERY
from clubhub.sql.players import PLAYER_WITH_CLUB_QUERY

CLUB_SEARCH_LIMIT = 10
PLAYER_SEARCH_LIMIT = 20


async def search_clubs(search_term: str) -> list[ClubWithCounts]:
    query = f"""
        {CLUB_WITH_COUNTS_QUERY}
        WHERE c.name ILIKE :search OR c.description ILIKE :search
        ORDER BY c.name ASC
        LIMIT :limit
        """
    result = await database.fetch_all(
        query=query, values={"search": f"%{search_term}%", "limit": CLUB_SEARCH_LIMIT}
    )
    return [ClubWithCounts.model_validate(dict(x._mapping)) for x in result]


async def search_players(search_term: str) -> list[PlayerWithClub]:
    query = f"""
        {PLAYER_WITH_CLUB_QUERY}
        WHERE p.name ILIKE :search OR p.email ILIKE :search OR p.place ILIKE :search
        ORDER BY p.name ASC
        LIMIT :limit
        """
    result = await database.fetch_all(
        query=query, values={"search": f"%{search_term}%", "limit": PLAYER_SEARCH_LIMIT}
    )
    return [PlayerWithClub.model_validate(dict(x._mapping)) for x in result]
