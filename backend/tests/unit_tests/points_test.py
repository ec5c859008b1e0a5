import pytest

from clubhub.logic.points import (
    PointSystemConfig,
    calculate_base_points,
    calculate_points_with_rules,
    compare,
    evaluate_conditional_rule,
    resolve_point_system_config,
)
from clubhub.models.db.match import MatchOutcome, MatchResultBody
from clubhub.models.db.point_system import (
    ComparisonOperator,
    ConditionalRule,
    RuleConditionType,
)
from clubhub.utils.dummy_records import (
    DUMMY_MOCK_TIME,
    DUMMY_RULE,
    DUMMY_STAGE,
    DUMMY_TEMPLATE,
    DUMMY_TOURNAMENT,
    DUMMY_TOURNAMENT_WITH_TEMPLATE,
)
from clubhub.utils.id_types import (
    ConditionalRuleId,
    PlayerId,
    PointSystemTemplateId,
    StagePointId,
)

GOAL_CONFIG = PointSystemConfig(
    points_per_win=3,
    points_per_draw=1,
    points_per_loss=0,
    points_per_goal_scored=1,
    points_per_goal_conceded=-1,
)


def result(outcome: MatchOutcome, scored: int, conceded: int) -> MatchResultBody:
    return MatchResultBody(
        player_id=PlayerId(1), outcome=outcome, goals_scored=scored, goals_conceded=conceded
    )


def rule(
    condition_type: RuleConditionType,
    operator: ComparisonOperator,
    threshold: int,
    point_adjustment: int = 1,
    rule_id: int = 1,
) -> ConditionalRule:
    return ConditionalRule(
        id=ConditionalRuleId(rule_id),
        template_id=PointSystemTemplateId(1),
        condition_type=condition_type,
        operator=operator,
        threshold=threshold,
        point_adjustment=point_adjustment,
        created=DUMMY_MOCK_TIME,
    )


def test_base_points_with_goal_coefficients() -> None:
    assert calculate_base_points(result(MatchOutcome.WIN, 2, 1), GOAL_CONFIG) == 4
    assert calculate_base_points(result(MatchOutcome.DRAW, 1, 1), GOAL_CONFIG) == 1
    assert calculate_base_points(result(MatchOutcome.LOSS, 0, 3), GOAL_CONFIG) == -3


def test_goals_scored_rule_above_threshold() -> None:
    bonus = rule(RuleConditionType.GOALS_SCORED_THRESHOLD, ComparisonOperator.GREATER_THAN, 3)

    assert evaluate_conditional_rule(result(MatchOutcome.WIN, 4, 0), bonus) is True
    assert evaluate_conditional_rule(result(MatchOutcome.WIN, 3, 0), bonus) is False


@pytest.mark.parametrize(
    ("operator", "expected"),
    [
        (ComparisonOperator.EQUALS, [False, True, False]),
        (ComparisonOperator.GREATER_THAN, [False, False, True]),
        (ComparisonOperator.LESS_THAN, [True, False, False]),
        (ComparisonOperator.GREATER_THAN_OR_EQUAL, [False, True, True]),
        (ComparisonOperator.LESS_THAN_OR_EQUAL, [True, True, False]),
    ],
)
def test_compare_operators(operator: ComparisonOperator, expected: list[bool]) -> None:
    assert [compare(value, operator, 2) for value in (1, 2, 3)] == expected


def test_rule_metrics_per_condition_type() -> None:
    stats = result(MatchOutcome.WIN, 5, 2)

    conceded = rule(RuleConditionType.GOALS_CONCEDED_THRESHOLD, ComparisonOperator.EQUALS, 2)
    difference = rule(RuleConditionType.GOAL_DIFFERENCE_THRESHOLD, ComparisonOperator.EQUALS, 3)
    clean_sheet = rule(RuleConditionType.CLEAN_SHEET, ComparisonOperator.EQUALS, 0)

    assert evaluate_conditional_rule(stats, conceded) is True
    assert evaluate_conditional_rule(stats, difference) is True
    assert evaluate_conditional_rule(stats, clean_sheet) is False
    assert evaluate_conditional_rule(result(MatchOutcome.WIN, 1, 0), clean_sheet) is True


def test_points_with_rules_sums_matching_adjustments() -> None:
    config = GOAL_CONFIG.model_copy(
        update={
            "conditional_rules": [
                rule(
                    RuleConditionType.GOALS_SCORED_THRESHOLD,
                    ComparisonOperator.GREATER_THAN,
                    3,
                    point_adjustment=2,
                    rule_id=1,
                ),
                rule(
                    RuleConditionType.CLEAN_SHEET,
                    ComparisonOperator.EQUALS,
                    0,
                    point_adjustment=1,
                    rule_id=2,
                ),
                rule(
                    RuleConditionType.GOALS_CONCEDED_THRESHOLD,
                    ComparisonOperator.GREATER_THAN,
                    2,
                    point_adjustment=-5,
                    rule_id=3,
                ),
            ]
        }
    )

    calculation = calculate_points_with_rules(result(MatchOutcome.WIN, 4, 0), config)

    assert calculation.base_points == 7
    assert calculation.conditional_points == 3
    assert calculation.total_points == 10
    assert [applied.rule_id for applied in calculation.applied_rules] == [1, 2]


def test_points_without_rules() -> None:
    calculation = calculate_points_with_rules(result(MatchOutcome.LOSS, 1, 2), GOAL_CONFIG)

    assert calculation.conditional_points == 0
    assert calculation.total_points == calculation.base_points == -1
    assert calculation.applied_rules == []


def test_resolve_config_uses_inline_fields_without_template() -> None:
    config = resolve_point_system_config(DUMMY_TOURNAMENT, None)

    assert config.points_per_win == DUMMY_TOURNAMENT.points_per_win
    assert config.points_per_goal_conceded == DUMMY_TOURNAMENT.points_per_goal_conceded
    assert config.conditional_rules == []


def test_resolve_config_uses_template_and_rules() -> None:
    config = resolve_point_system_config(DUMMY_TOURNAMENT_WITH_TEMPLATE, DUMMY_TEMPLATE)

    assert config.points_per_goal_scored == 1
    assert config.points_per_goal_conceded == -1
    assert config.conditional_rules == [DUMMY_RULE]


def test_resolve_config_prefers_stage_of_template() -> None:
    config = resolve_point_system_config(
        DUMMY_TOURNAMENT_WITH_TEMPLATE, DUMMY_TEMPLATE, DUMMY_STAGE.id
    )

    assert config.points_per_win == DUMMY_STAGE.points_per_win
    assert config.points_per_loss == DUMMY_STAGE.points_per_loss
    assert config.conditional_rules == []


def test_resolve_config_ignores_unknown_stage() -> None:
    config = resolve_point_system_config(
        DUMMY_TOURNAMENT_WITH_TEMPLATE, DUMMY_TEMPLATE, StagePointId(999)
    )

    assert config.points_per_win == DUMMY_TEMPLATE.points_per_win
    assert config.conditional_rules == [DUMMY_RULE]


def test_resolve_config_ignores_template_of_other_tournament() -> None:
    config = resolve_point_system_config(DUMMY_TOURNAMENT, DUMMY_TEMPLATE, DUMMY_STAGE.id)

    assert config.points_per_win == DUMMY_TOURNAMENT.points_per_win
    assert config.conditional_rules == []
