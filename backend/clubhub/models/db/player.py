import re
from datetime import date
from enum import auto

from heliclockter import datetime_utc
from pydantic import BaseModel, Field, computed_field, field_validator

from clubhub.models.db.shared import BaseModelORM
from clubhub.utils.id_types import ClubId, PlayerId
from clubhub.utils.types import EnumAutoStr

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


class PlayerRole(EnumAutoStr):
    MANAGER = auto()
    MENTOR = auto()
    CAPTAIN = auto()
    PLAYER = auto()


class Gender(EnumAutoStr):
    MALE = auto()
    FEMALE = auto()
    OTHER = auto()


def validate_email(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    if value == "":
        return None
    if not EMAIL_PATTERN.match(value):
        raise ValueError("Invalid email format")
    return value.lower()


class PlayerBody(BaseModelORM):
    name: str = Field(min_length=1, max_length=100)
    email: str | None = Field(default=None, max_length=100)
    phone: str | None = Field(default=None, max_length=20)
    date_of_birth: date | None = None
    gender: Gender | None = None
    place: str | None = Field(default=None, max_length=100)
    state: str | None = Field(default=None, max_length=100)
    district: str | None = Field(default=None, max_length=100)
    photo: str | None = Field(default=None, max_length=255)
    roles: list[PlayerRole] = Field(default_factory=lambda: [PlayerRole.PLAYER], min_length=1)

    normalize_email = field_validator("email")(validate_email)

    def roles_with_player(self) -> list[PlayerRole]:
        """Club members always carry the PLAYER role next to whatever else they do."""
        roles = list(dict.fromkeys(self.roles))
        if PlayerRole.PLAYER not in roles:
            roles.append(PlayerRole.PLAYER)
        return roles


class PlayerUpdateBody(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=100)
    email: str | None = Field(default=None, max_length=100)
    phone: str | None = Field(default=None, max_length=20)
    date_of_birth: date | None = None
    gender: Gender | None = None
    place: str | None = Field(default=None, max_length=100)
    state: str | None = Field(default=None, max_length=100)
    district: str | None = Field(default=None, max_length=100)
    photo: str | None = Field(default=None, max_length=255)
    roles: list[PlayerRole] | None = Field(default=None, min_length=1)

    normalize_email = field_validator("email")(validate_email)


class FreeAgentBody(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    email: str = Field(max_length=100)
    phone: str = Field(min_length=1, max_length=20)
    date_of_birth: date
    gender: Gender = Gender.MALE
    state: str = Field(min_length=1, max_length=100)
    district: str = Field(min_length=1, max_length=100)
    photo: str | None = Field(default=None, max_length=255)

    @field_validator("email")
    @classmethod
    def email_is_required(cls, value: str) -> str:
        normalized = validate_email(value)
        if normalized is None:
            raise ValueError("Email is required")
        return normalized

    def to_player_body(self) -> PlayerBody:
        return PlayerBody(**self.model_dump(), roles=[PlayerRole.PLAYER])


class PlayerBulkBody(BaseModel):
    players: list[PlayerBody] = Field(min_length=1, max_length=500)

    def with_default_place(self) -> list[PlayerBody]:
        return [
            player.model_copy(update={"place": f"{player.district}, {player.state}"})
            if player.place is None and player.district and player.state
            else player
            for player in self.players
        ]


class PlayerInsertable(BaseModelORM):
    name: str
    email: str | None = None
    phone: str | None = None
    date_of_birth: date | None = None
    gender: Gender | None = None
    place: str | None = None
    state: str | None = None
    district: str | None = None
    photo: str | None = None
    club_id: ClubId | None = None
    created: datetime_utc
    updated: datetime_utc


class Player(PlayerInsertable):
    id: PlayerId
    roles: list[PlayerRole] = Field(default_factory=list)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def is_free_agent(self) -> bool:
        return self.club_id is None


class PlayerWithClub(Player):
    club_name: str | None = None
    club_logo: str | None = None


class BulkCreateResult(BaseModel):
    added: int
    skipped: int
