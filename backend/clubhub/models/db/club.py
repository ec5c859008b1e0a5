from heliclockter import datetime_utc
from pydantic import BaseModel, Field

from clubhub.models.db.shared import BaseModelORM
from clubhub.utils.id_types import ClubId


class ClubBody(BaseModelORM):
    name: str = Field(min_length=1, max_length=100)
    logo: str | None = Field(default=None, max_length=255)
    description: str | None = None


class ClubUpdateBody(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=100)
    logo: str | None = Field(default=None, max_length=255)
    description: str | None = None


class ClubInsertable(ClubBody):
    created: datetime_utc
    updated: datetime_utc


class Club(ClubInsertable):
    id: ClubId


class ClubWithCounts(Club):
    player_count: int = 0
    tournament_count: int = 0
