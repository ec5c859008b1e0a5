from clubhub.models.db.club import Club
from clubhub.models.db.player import PlayerRole, PlayerWithClub
from clubhub.models.leaderboard import ClubHierarchy


def build_club_hierarchy(club: Club, players: list[PlayerWithClub]) -> ClubHierarchy:
    """Group the members of a club by role. A player holding several roles shows up in each."""

    def with_role(role: PlayerRole) -> list[PlayerWithClub]:
        return [player for player in players if role in player.roles]

    return ClubHierarchy(
        club=club,
        managers=with_role(PlayerRole.MANAGER),
        mentors=with_role(PlayerRole.MENTOR),
        captains=with_role(PlayerRole.CAPTAIN),
        players=with_role(PlayerRole.PLAYER),
    )
