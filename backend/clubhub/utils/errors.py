from collections.abc import Iterator
from contextlib import contextmanager
from enum import auto

from asyncpg.exceptions import ForeignKeyViolationError
from fastapi import HTTPException
from starlette import status

from clubhub.utils.types import EnumAutoStr


class ValidationError(HTTPException):
    def __init__(self, message: str, details: dict[str, list[str]] | None = None) -> None:
        super().__init__(status.HTTP_400_BAD_REQUEST, message)
        self.details = details


class UnauthorizedError(HTTPException):
    def __init__(self, message: str = "Unauthorized") -> None:
        super().__init__(
            status.HTTP_401_UNAUTHORIZED, message, headers={"WWW-Authenticate": "Bearer"}
        )


class NotFoundError(HTTPException):
    def __init__(self, resource: str) -> None:
        super().__init__(status.HTTP_404_NOT_FOUND, f"{resource} not found")


class ConflictError(HTTPException):
    def __init__(self, message: str) -> None:
        super().__init__(status.HTTP_409_CONFLICT, message)


class UniqueIndex(EnumAutoStr):
    ix_players_email = auto()
    ix_admins_username = auto()
    ix_point_system_templates_name = auto()
    tournament_participants_tournament_id_player_id_key = auto()
    tournament_player_stats_tournament_id_player_id_key = auto()
    player_roles_player_id_role_key = auto()


class ForeignKey(EnumAutoStr):
    tournaments_club_id_fkey = auto()
    tournaments_point_system_template_id_fkey = auto()
    matches_stage_id_fkey = auto()
    match_results_player_id_fkey = auto()
    tournament_participants_player_id_fkey = auto()


unique_index_violation_error_lookup = {
    UniqueIndex.ix_players_email: "A player with this email already exists",
    UniqueIndex.ix_admins_username: "An admin with this username already exists",
    UniqueIndex.ix_point_system_templates_name: (
        "A point system template with this name already exists"
    ),
    UniqueIndex.tournament_participants_tournament_id_player_id_key: (
        "This player is already a participant in this tournament"
    ),
    UniqueIndex.tournament_player_stats_tournament_id_player_id_key: (
        "Statistics for this player already exist in this tournament"
    ),
    UniqueIndex.player_roles_player_id_role_key: "This player already has this role",
}


foreign_key_violation_error_lookup = {
    ForeignKey.tournaments_club_id_fkey: "This club still hosts tournaments",
    ForeignKey.tournaments_point_system_template_id_fkey: (
        "This point system template is still used by one or more tournaments"
    ),
    ForeignKey.matches_stage_id_fkey: "This stage is still referenced by one or more matches",
    ForeignKey.match_results_player_id_fkey: "This player still has match results",
    ForeignKey.tournament_participants_player_id_fkey: (
        "This player still participates in one or more tournaments"
    ),
}


@contextmanager
def check_foreign_key_violation(foreign_keys_to_check: set[ForeignKey]) -> Iterator[None]:
    try:
        yield
    except ForeignKeyViolationError as exc:
        constraint_name = getattr(exc, "constraint_name", None)
        for foreign_key in foreign_keys_to_check:
            if constraint_name == foreign_key.value:
                raise ConflictError(foreign_key_violation_error_lookup[foreign_key]) from exc

        raise
