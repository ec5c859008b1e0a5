from datetime import date

import pytest
from heliclockter import datetime_utc, timedelta
from pydantic import ValidationError

from clubhub.models.db.match import (
    BulkMatchEntry,
    MatchCreateBody,
    MatchOutcome,
    MatchResultBody,
    MatchUpdateBody,
    ScoredResult,
)
from clubhub.models.db.player import FreeAgentBody, PlayerBody, PlayerBulkBody, PlayerRole
from clubhub.models.db.point_system import (
    ComparisonOperator,
    ConditionalRuleBody,
    ConditionalRuleUpdateBody,
    RuleConditionType,
)
from clubhub.models.db.tournament import TournamentBody, TournamentStatus
from clubhub.utils.dummy_records import DUMMY_MOCK_TIME, DUMMY_TOURNAMENT
from clubhub.utils.id_types import PlayerId


def test_player_email_is_normalized() -> None:
    player = PlayerBody(name="Alex", email="  Alex@Example.COM ")
    assert player.email == "alex@example.com"
    assert PlayerBody(name="Alex", email="").email is None


def test_player_rejects_invalid_fields() -> None:
    with pytest.raises(ValidationError):
        PlayerBody(name="Alex", email="not-an-email")
    with pytest.raises(ValidationError):
        PlayerBody(name="")
    with pytest.raises(ValidationError):
        PlayerBody(name="x" * 101)
    with pytest.raises(ValidationError):
        PlayerBody(name="Alex", phone="1" * 21)


def test_club_players_always_have_player_role() -> None:
    player = PlayerBody(name="Alex", roles=[PlayerRole.CAPTAIN, PlayerRole.CAPTAIN])
    assert player.roles_with_player() == [PlayerRole.CAPTAIN, PlayerRole.PLAYER]


def test_bulk_players_get_default_place() -> None:
    body = PlayerBulkBody(
        players=[
            PlayerBody(name="Alex", district="North", state="Coast"),
            PlayerBody(name="Sam", place="Harbor", district="North", state="Coast"),
        ]
    )

    assert [player.place for player in body.with_default_place()] == ["North, Coast", "Harbor"]


def test_free_agent_requires_email() -> None:
    with pytest.raises(ValidationError):
        FreeAgentBody(
            name="Robin",
            email="",
            phone="123",
            date_of_birth=date(2000, 1, 1),
            state="Coast",
            district="North",
        )


def test_match_results_reject_negative_goals_and_duplicates() -> None:
    with pytest.raises(ValidationError):
        MatchResultBody(player_id=PlayerId(1), outcome=MatchOutcome.WIN, goals_scored=-1)

    win = MatchResultBody(player_id=PlayerId(1), outcome=MatchOutcome.WIN)
    with pytest.raises(ValidationError):
        MatchCreateBody(match_date=DUMMY_MOCK_TIME, results=[win, win])
    with pytest.raises(ValidationError):
        MatchCreateBody(match_date=DUMMY_MOCK_TIME, results=[])
    with pytest.raises(ValidationError):
        MatchUpdateBody(results=[win, win])

    assert MatchUpdateBody(stage_name="Final").results is None


def test_scored_result_points_must_add_up() -> None:
    with pytest.raises(ValidationError):
        ScoredResult(
            player_id=PlayerId(1),
            outcome=MatchOutcome.WIN,
            base_points=3,
            conditional_points=1,
            points_earned=3,
        )


def test_bulk_entry_outcomes() -> None:
    def entry(goals_a: int, goals_b: int) -> BulkMatchEntry:
        return BulkMatchEntry(
            player_a_name="A",
            player_b_name="B",
            player_a_goals=goals_a,
            player_b_goals=goals_b,
            match_date=DUMMY_MOCK_TIME,
        )

    assert entry(2, 1).outcomes() == (MatchOutcome.WIN, MatchOutcome.LOSS)
    assert entry(0, 3).outcomes() == (MatchOutcome.LOSS, MatchOutcome.WIN)
    assert entry(1, 1).outcomes() == (MatchOutcome.DRAW, MatchOutcome.DRAW)


def test_conditional_rule_validation() -> None:
    with pytest.raises(ValidationError):
        ConditionalRuleBody(
            condition_type=RuleConditionType.GOALS_SCORED_THRESHOLD,
            operator=ComparisonOperator.GREATER_THAN,
            threshold=-1,
            point_adjustment=1,
        )
    with pytest.raises(ValidationError):
        ConditionalRuleBody(
            condition_type=RuleConditionType.CLEAN_SHEET,
            operator=ComparisonOperator.GREATER_THAN,
            threshold=0,
            point_adjustment=1,
        )
    with pytest.raises(ValidationError):
        ConditionalRuleUpdateBody(condition_type=RuleConditionType.CLEAN_SHEET, threshold=2)

    rule = ConditionalRuleBody(
        condition_type=RuleConditionType.GOAL_DIFFERENCE_THRESHOLD,
        operator=ComparisonOperator.LESS_THAN,
        threshold=0,
        point_adjustment=-2,
    )
    assert rule.point_adjustment == -2


def test_tournament_dates_and_coefficients() -> None:
    with pytest.raises(ValidationError):
        TournamentBody(
            name="Cup",
            start_date=DUMMY_MOCK_TIME,
            end_date=DUMMY_MOCK_TIME - timedelta(days=1),
        )
    with pytest.raises(ValidationError):
        TournamentBody(name="Cup", start_date=DUMMY_MOCK_TIME, points_per_win=-1)

    body = TournamentBody(name="Cup", start_date=DUMMY_MOCK_TIME)
    assert (body.points_per_win, body.points_per_draw, body.points_per_loss) == (3, 1, 0)


def test_tournament_status() -> None:
    assert DUMMY_TOURNAMENT.status_at(DUMMY_MOCK_TIME - timedelta(days=1)) == (
        TournamentStatus.UPCOMING
    )
    assert DUMMY_TOURNAMENT.status_at(DUMMY_MOCK_TIME + timedelta(days=1)) == (
        TournamentStatus.ONGOING
    )
    assert DUMMY_TOURNAMENT.status_at(DUMMY_MOCK_TIME + timedelta(days=60)) == (
        TournamentStatus.COMPLETED
    )


def test_fixture_times_are_utc() -> None:
    assert isinstance(DUMMY_MOCK_TIME, datetime_utc)
    assert DUMMY_MOCK_TIME.utcoffset() == timedelta(0)
    assert DUMMY_TOURNAMENT.end_date is not None
    assert DUMMY_TOURNAMENT.end_date - DUMMY_TOURNAMENT.start_date == timedelta(days=31)
