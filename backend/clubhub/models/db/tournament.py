from enum import auto
from typing import Self

from heliclockter import datetime_utc
from pydantic import BaseModel, Field, model_validator

from clubhub.models.db.player import PlayerWithClub
from clubhub.models.db.shared import BaseModelORM
from clubhub.utils.id_types import (
    ClubId,
    PlayerId,
    PointSystemTemplateId,
    TournamentId,
    TournamentParticipantId,
)
from clubhub.utils.types import EnumAutoStr


class TournamentStatus(EnumAutoStr):
    UPCOMING = auto()
    ONGOING = auto()
    COMPLETED = auto()


def check_date_range(start_date: datetime_utc | None, end_date: datetime_utc | None) -> None:
    if start_date is not None and end_date is not None and end_date < start_date:
        raise ValueError("End date must be after start date")


class TournamentBody(BaseModelORM):
    name: str = Field(min_length=1, max_length=100)
    description: str | None = None
    start_date: datetime_utc
    end_date: datetime_utc | None = None
    club_id: ClubId | None = None
    point_system_template_id: PointSystemTemplateId | None = None
    points_per_win: int = Field(default=3, ge=0)
    points_per_draw: int = Field(default=1, ge=0)
    points_per_loss: int = Field(default=0, ge=0)
    points_per_goal_scored: int = Field(default=0, ge=0)
    points_per_goal_conceded: int = Field(default=0, ge=0)

    @model_validator(mode="after")
    def check_dates(self) -> Self:
        check_date_range(self.start_date, self.end_date)
        return self


class TournamentUpdateBody(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=100)
    description: str | None = None
    start_date: datetime_utc | None = None
    end_date: datetime_utc | None = None
    club_id: ClubId | None = None
    point_system_template_id: PointSystemTemplateId | None = None
    points_per_win: int | None = Field(default=None, ge=0)
    points_per_draw: int | None = Field(default=None, ge=0)
    points_per_loss: int | None = Field(default=None, ge=0)
    points_per_goal_scored: int | None = Field(default=None, ge=0)
    points_per_goal_conceded: int | None = Field(default=None, ge=0)

    @model_validator(mode="after")
    def check_dates(self) -> Self:
        check_date_range(self.start_date, self.end_date)
        return self


class TournamentInsertable(TournamentBody):
    created: datetime_utc
    updated: datetime_utc


class Tournament(TournamentInsertable):
    id: TournamentId

    def status_at(self, now: datetime_utc) -> TournamentStatus:
        if now < self.start_date:
            return TournamentStatus.UPCOMING
        if self.end_date is not None and now > self.end_date:
            return TournamentStatus.COMPLETED
        return TournamentStatus.ONGOING


class TournamentWithCounts(Tournament):
    club_name: str | None = None
    point_system_template_name: str | None = None
    participant_count: int = 0
    match_count: int = 0


class ParticipantsBody(BaseModel):
    player_ids: list[PlayerId] = Field(min_length=1)


class TournamentParticipant(BaseModelORM):
    id: TournamentParticipantId
    tournament_id: TournamentId
    player_id: PlayerId
    created: datetime_utc


class ParticipantWithPlayer(TournamentParticipant):
    player: PlayerWithClub


class ParticipantsAdded(BaseModel):
    added: int
    skipped: int


class ParticipantRemoved(BaseModel):
    success: bool = True
    deleted_results: int = 0
    warning: str | None = None
