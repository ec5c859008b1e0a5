"""
Point calculation for match results.

Everything in here is free of database access: callers load the tournament, its template and
the match, and hand them over to `resolve_point_system_config` and
`calculate_points_with_rules`.
"""

from typing import Protocol

from pydantic import BaseModel, Field

from clubhub.models.db.match import MatchOutcome
from clubhub.models.db.point_system import (
    ComparisonOperator,
    ConditionalRule,
    FullPointSystemTemplate,
    PointCoefficients,
    RuleConditionType,
)
from clubhub.models.db.tournament import Tournament
from clubhub.utils.id_types import ConditionalRuleId, StagePointId


class ResultStats(Protocol):
    outcome: MatchOutcome
    goals_scored: int
    goals_conceded: int


class PointSystemConfig(PointCoefficients):
    conditional_rules: list[ConditionalRule] = Field(default_factory=list)


class AppliedRule(BaseModel):
    rule_id: ConditionalRuleId
    point_adjustment: int


class PointCalculation(BaseModel):
    base_points: int
    conditional_points: int
    total_points: int
    applied_rules: list[AppliedRule]


def _rule_metric(result: ResultStats, condition_type: RuleConditionType) -> int:
    match condition_type:
        case RuleConditionType.GOALS_SCORED_THRESHOLD:
            return result.goals_scored
        case RuleConditionType.GOALS_CONCEDED_THRESHOLD | RuleConditionType.CLEAN_SHEET:
            return result.goals_conceded
        case RuleConditionType.GOAL_DIFFERENCE_THRESHOLD:
            return result.goals_scored - result.goals_conceded


def compare(value: int, operator: ComparisonOperator, threshold: int) -> bool:
    match operator:
        case ComparisonOperator.EQUALS:
            return value == threshold
        case ComparisonOperator.GREATER_THAN:
            return value > threshold
        case ComparisonOperator.LESS_THAN:
            return value < threshold
        case ComparisonOperator.GREATER_THAN_OR_EQUAL:
            return value >= threshold
        case ComparisonOperator.LESS_THAN_OR_EQUAL:
            return value <= threshold


def evaluate_conditional_rule(result: ResultStats, rule: ConditionalRule) -> bool:
    return compare(_rule_metric(result, rule.condition_type), rule.operator, rule.threshold)


def calculate_base_points(result: ResultStats, coefficients: PointCoefficients) -> int:
    outcome_points = {
        MatchOutcome.WIN: coefficients.points_per_win,
        MatchOutcome.DRAW: coefficients.points_per_draw,
        MatchOutcome.LOSS: coefficients.points_per_loss,
    }[result.outcome]

    return (
        outcome_points
        + result.goals_scored * coefficients.points_per_goal_scored
        + result.goals_conceded * coefficients.points_per_goal_conceded
    )


def calculate_points_with_rules(result: ResultStats, config: PointSystemConfig) -> PointCalculation:
    base_points = calculate_base_points(result, config)
    applied_rules = [
        AppliedRule(rule_id=rule.id, point_adjustment=rule.point_adjustment)
        for rule in config.conditional_rules
        if evaluate_conditional_rule(result, rule)
    ]
    conditional_points = sum(rule.point_adjustment for rule in applied_rules)

    return PointCalculation(
        base_points=base_points,
        conditional_points=conditional_points,
        total_points=base_points + conditional_points,
        applied_rules=applied_rules,
    )


def _coefficients_of(source: PointCoefficients | Tournament) -> dict[str, int]:
    return {name: getattr(source, name) for name in PointCoefficients.model_fields}


def resolve_point_system_config(
    tournament: Tournament,
    template: FullPointSystemTemplate | None,
    stage_id: StagePointId | None = None,
) -> PointSystemConfig:
    """
    Determine which coefficients and rules score a result of the given match.

    A stage of the tournament's own template overrides the template's coefficients (its rules
    are not applied on top). Without a stage the template's coefficients and rules apply.
    Tournaments without (an existing) template are scored with their inline coefficients.
    """
    if template is not None and template.id == tournament.point_system_template_id:
        stage = template.get_stage(stage_id)
        if stage is not None:
            return PointSystemConfig(**_coefficients_of(stage))

        return PointSystemConfig(
            **_coefficients_of(template), conditional_rules=template.conditional_rules
        )

    return PointSystemConfig(**_coefficients_of(tournament))
