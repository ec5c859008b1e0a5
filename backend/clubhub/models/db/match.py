from enum import auto
from typing import Self

from heliclockter import datetime_utc
from pydantic import BaseModel, Field, field_validator, model_validator

from clubhub.models.db.shared import BaseModelORM
from clubhub.utils.id_types import (
    MatchId,
    MatchResultId,
    PlayerId,
    StagePointId,
    TournamentId,
)
from clubhub.utils.types import EnumAutoStr


class MatchOutcome(EnumAutoStr):
    WIN = auto()
    DRAW = auto()
    LOSS = auto()


class MatchResultBody(BaseModelORM):
    player_id: PlayerId
    outcome: MatchOutcome
    goals_scored: int = Field(default=0, ge=0)
    goals_conceded: int = Field(default=0, ge=0)


def check_unique_players(results: list[MatchResultBody]) -> list[MatchResultBody]:
    player_ids = [result.player_id for result in results]
    if len(player_ids) != len(set(player_ids)):
        raise ValueError("Each player can only have one result per match")
    return results


class MatchCreateBody(BaseModel):
    match_date: datetime_utc
    stage_id: StagePointId | None = None
    stage_name: str | None = Field(default=None, max_length=100)
    results: list[MatchResultBody] = Field(min_length=1)

    unique_players = field_validator("results")(check_unique_players)


class MatchUpdateBody(BaseModel):
    match_date: datetime_utc | None = None
    stage_id: StagePointId | None = None
    stage_name: str | None = Field(default=None, max_length=100)
    results: list[MatchResultBody] | None = Field(default=None, min_length=1)

    @field_validator("results")
    @classmethod
    def results_have_unique_players(
        cls, results: list[MatchResultBody] | None
    ) -> list[MatchResultBody] | None:
        return check_unique_players(results) if results is not None else None


class BulkMatchEntry(BaseModel):
    player_a_name: str = Field(min_length=1, max_length=100)
    player_b_name: str = Field(min_length=1, max_length=100)
    player_a_goals: int = Field(ge=0)
    player_b_goals: int = Field(ge=0)
    match_date: datetime_utc

    def outcomes(self) -> tuple[MatchOutcome, MatchOutcome]:
        if self.player_a_goals > self.player_b_goals:
            return MatchOutcome.WIN, MatchOutcome.LOSS
        if self.player_a_goals < self.player_b_goals:
            return MatchOutcome.LOSS, MatchOutcome.WIN
        return MatchOutcome.DRAW, MatchOutcome.DRAW


class MatchBulkBody(BaseModel):
    matches: list[BulkMatchEntry] = Field(min_length=1, max_length=500)


class MatchBulkResult(BaseModel):
    added: int
    skipped: int
    errors: list[str] = Field(default_factory=list)


class MatchInsertable(BaseModelORM):
    tournament_id: TournamentId
    match_date: datetime_utc
    stage_id: StagePointId | None = None
    stage_name: str | None = None
    created: datetime_utc
    updated: datetime_utc


class Match(MatchInsertable):
    id: MatchId


class ScoredResult(MatchResultBody):
    base_points: int
    conditional_points: int
    points_earned: int

    @model_validator(mode="after")
    def points_earned_is_sum(self) -> Self:
        if self.points_earned != self.base_points + self.conditional_points:
            raise ValueError("points_earned must equal base_points + conditional_points")
        return self


class MatchResultInsertable(ScoredResult):
    match_id: MatchId
    created: datetime_utc


class MatchResult(MatchResultInsertable):
    id: MatchResultId


class MatchResultWithPlayer(MatchResult):
    player_name: str
    player_photo: str | None = None
    club_name: str | None = None


class MatchWithResults(Match):
    tournament_name: str | None = None
    results: list[MatchResultWithPlayer] = Field(default_factory=list)


class MatchResultWithStage(MatchResult):
    stage_id: StagePointId | None = None
