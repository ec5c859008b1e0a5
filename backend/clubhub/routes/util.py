from pathlib import Path
from uuid import uuid4

import aiofiles
import aiofiles.os
from fastapi import UploadFile

from clubhub.models.db.club import Club
from clubhub.models.db.match import Match
from clubhub.models.db.player import PlayerWithClub
from clubhub.models.db.point_system import ConditionalRule, FullPointSystemTemplate
from clubhub.models.db.tournament import Tournament
from clubhub.sql.clubs import get_club_by_id
from clubhub.sql.matches import get_match_by_id
from clubhub.sql.players import get_player_by_id
from clubhub.sql.point_systems import get_conditional_rule, get_point_system_template
from clubhub.sql.tournaments import get_tournament_by_id
from clubhub.utils.errors import NotFoundError, ValidationError
from clubhub.utils.id_types import (
    ClubId,
    ConditionalRuleId,
    MatchId,
    PlayerId,
    PointSystemTemplateId,
    TournamentId,
)
from clubhub.utils.logging import logger

MAX_UPLOAD_SIZE_BYTES = 2 * 1024 * 1024
IMAGE_EXTENSIONS = {".png", ".jpg", ".jpeg", ".webp"}
IMAGE_SIGNATURES = (
    b"\x89PNG\r\n\x1a\n",
    b"\xff\xd8\xff",
    b"RIFF",
)


async def club_dependency(club_id: ClubId) -> Club:
    club = await get_club_by_id(club_id)
    if club is None:
        raise NotFoundError("Club")
    return club


async def player_dependency(player_id: PlayerId) -> PlayerWithClub:
    player = await get_player_by_id(player_id)
    if player is None:
        raise NotFoundError("Player")
    return player


async def free_agent_dependency(player_id: PlayerId) -> PlayerWithClub:
    player = await get_player_by_id(player_id)
    if player is None or not player.is_free_agent:
        raise NotFoundError("Free agent")
    return player


async def tournament_dependency(tournament_id: TournamentId) -> Tournament:
    tournament = await get_tournament_by_id(tournament_id)
    if tournament is None:
        raise NotFoundError("Tournament")
    return tournament


async def match_dependency(match_id: MatchId) -> Match:
    match = await get_match_by_id(match_id)
    if match is None:
        raise NotFoundError("Match")
    return match


async def point_system_dependency(template_id: PointSystemTemplateId) -> FullPointSystemTemplate:
    template = await get_point_system_template(template_id)
    if template is None:
        raise NotFoundError("Point system template")
    return template


async def conditional_rule_dependency(
    template_id: PointSystemTemplateId, rule_id: ConditionalRuleId
) -> ConditionalRule:
    rule = await get_conditional_rule(template_id, rule_id)
    if rule is None:
        raise NotFoundError("Conditional rule")
    return rule


async def read_validated_image_upload(file: UploadFile, *, file_label: str) -> tuple[bytes, str]:
    extension = Path(file.filename or "").suffix.lower()
    if extension not in IMAGE_EXTENSIONS:
        raise ValidationError(
            f"{file_label} must be one of: {', '.join(sorted(IMAGE_EXTENSIONS))}"
        )

    image_bytes = await file.read(MAX_UPLOAD_SIZE_BYTES + 1)
    if len(image_bytes) > MAX_UPLOAD_SIZE_BYTES:
        raise ValidationError(f"{file_label} must be smaller than 2 MB")

    if not image_bytes.startswith(IMAGE_SIGNATURES):
        raise ValidationError(f"{file_label} is not a valid image")

    return image_bytes, extension


async def store_upload(directory: str, image_bytes: bytes, extension: str) -> str:
    """Write an uploaded image below `static/` and return its public path."""
    path = f"static/{directory}/{uuid4()}{extension}"
    await aiofiles.os.makedirs(f"static/{directory}", exist_ok=True)
    async with aiofiles.open(path, "wb") as f:
        await f.write(image_bytes)
    return f"/{path}"


async def remove_upload(public_path: str | None) -> None:
    if public_path is None or not public_path.startswith("/static/"):
        return

    try:
        await aiofiles.os.remove(public_path.lstrip("/"))
    except OSError as exc:
        logger.error(f"Could not remove upload that should still exist: {public_path}\n{exc}")
