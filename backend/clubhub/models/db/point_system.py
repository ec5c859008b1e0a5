from enum import auto
from typing import Self

from heliclockter import datetime_utc
from pydantic import BaseModel, Field, model_validator

from clubhub.models.db.shared import BaseModelORM
from clubhub.utils.id_types import ConditionalRuleId, PointSystemTemplateId, StagePointId
from clubhub.utils.types import EnumAutoStr


class RuleConditionType(EnumAutoStr):
    GOALS_SCORED_THRESHOLD = auto()
    GOALS_CONCEDED_THRESHOLD = auto()
    GOAL_DIFFERENCE_THRESHOLD = auto()
    CLEAN_SHEET = auto()

    @property
    def is_goal_based(self) -> bool:
        return self is not RuleConditionType.CLEAN_SHEET


class ComparisonOperator(EnumAutoStr):
    EQUALS = auto()
    GREATER_THAN = auto()
    LESS_THAN = auto()
    GREATER_THAN_OR_EQUAL = auto()
    LESS_THAN_OR_EQUAL = auto()


def check_rule_consistency(
    condition_type: RuleConditionType | None,
    operator: ComparisonOperator | None,
    threshold: int | None,
) -> None:
    if condition_type is None:
        return

    if condition_type.is_goal_based and threshold is not None and threshold < 0:
        raise ValueError("Threshold must be non-negative for goal-based conditions")

    if condition_type is RuleConditionType.CLEAN_SHEET and (
        operator not in (None, ComparisonOperator.EQUALS) or threshold not in (None, 0)
    ):
        raise ValueError("Clean sheet condition must use EQUALS operator with threshold 0")


class ConditionalRuleBody(BaseModelORM):
    condition_type: RuleConditionType
    operator: ComparisonOperator
    threshold: int
    point_adjustment: int

    @model_validator(mode="after")
    def check_condition(self) -> Self:
        check_rule_consistency(self.condition_type, self.operator, self.threshold)
        return self


class ConditionalRuleUpdateBody(BaseModel):
    condition_type: RuleConditionType | None = None
    operator: ComparisonOperator | None = None
    threshold: int | None = None
    point_adjustment: int | None = None

    @model_validator(mode="after")
    def check_condition(self) -> Self:
        check_rule_consistency(self.condition_type, self.operator, self.threshold)
        return self


class ConditionalRule(ConditionalRuleBody):
    id: ConditionalRuleId
    template_id: PointSystemTemplateId
    created: datetime_utc


class PointCoefficients(BaseModelORM):
    points_per_win: int
    points_per_draw: int
    points_per_loss: int
    points_per_goal_scored: int
    points_per_goal_conceded: int


class StagePointBody(PointCoefficients):
    stage_name: str = Field(min_length=1, max_length=100)
    stage_order: int = Field(default=0, ge=0)


class StagePoint(StagePointBody):
    id: StagePointId
    template_id: PointSystemTemplateId


class PointSystemTemplateBody(PointCoefficients):
    name: str = Field(min_length=1, max_length=100)
    description: str | None = None
    points_for_walkover_win: int = 3
    points_for_walkover_loss: int = -3
    points_per_stage_win: int = 0
    points_per_stage_draw: int = 0
    points_per_clean_sheet: int = 0
    stage_points: list[StagePointBody] = Field(default_factory=list)
    conditional_rules: list[ConditionalRuleBody] = Field(default_factory=list)


class PointSystemTemplateUpdateBody(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=100)
    description: str | None = None
    points_per_win: int | None = None
    points_per_draw: int | None = None
    points_per_loss: int | None = None
    points_per_goal_scored: int | None = None
    points_per_goal_conceded: int | None = None
    points_for_walkover_win: int | None = None
    points_for_walkover_loss: int | None = None
    points_per_stage_win: int | None = None
    points_per_stage_draw: int | None = None
    points_per_clean_sheet: int | None = None
    stage_points: list[StagePointBody] | None = None


class PointSystemTemplate(PointCoefficients):
    id: PointSystemTemplateId
    name: str
    description: str | None = None
    points_for_walkover_win: int
    points_for_walkover_loss: int
    points_per_stage_win: int
    points_per_stage_draw: int
    points_per_clean_sheet: int
    created: datetime_utc
    updated: datetime_utc


class PointSystemTemplateSummary(PointSystemTemplate):
    rule_count: int = 0
    stage_count: int = 0
    tournament_count: int = 0


class FullPointSystemTemplate(PointSystemTemplate):
    stage_points: list[StagePoint] = Field(default_factory=list)
    conditional_rules: list[ConditionalRule] = Field(default_factory=list)

    def get_stage(self, stage_id: StagePointId | None) -> StagePoint | None:
        if stage_id is None:
            return None
        return next((stage for stage in self.stage_points if stage.id == stage_id), None)
