from datetime import datetime, timezone

from heliclockter import datetime_utc

from clubhub.models.db.admin import AdminPublic
from clubhub.models.db.club import Club
from clubhub.models.db.match import MatchOutcome, MatchResultWithStage
from clubhub.models.db.player import PlayerRole, PlayerWithClub
from clubhub.models.db.point_system import (
    ComparisonOperator,
    ConditionalRule,
    FullPointSystemTemplate,
    RuleConditionType,
    StagePoint,
)
from clubhub.models.db.tournament import Tournament
from clubhub.utils.id_types import (
    AdminId,
    ClubId,
    ConditionalRuleId,
    MatchId,
    MatchResultId,
    PlayerId,
    PointSystemTemplateId,
    StagePointId,
    TournamentId,
)

DUMMY_MOCK_TIME = datetime_utc.from_datetime(datetime(2026, 5, 1, 12, 0, 0, tzinfo=timezone.utc))

DUMMY_ADMIN = AdminPublic(
    id=AdminId(1), username="admin", email="admin@example.com", created=DUMMY_MOCK_TIME
)

DUMMY_CLUB = Club(
    id=ClubId(1),
    name="Riverside FC",
    logo=None,
    description="Sample club",
    created=DUMMY_MOCK_TIME,
    updated=DUMMY_MOCK_TIME,
)

DUMMY_TOURNAMENT = Tournament(
    id=TournamentId(1),
    name="Spring Cup",
    description=None,
    start_date=DUMMY_MOCK_TIME,
    end_date=datetime_utc.from_datetime(datetime(2026, 6, 1, 12, 0, 0, tzinfo=timezone.utc)),
    club_id=ClubId(1),
    point_system_template_id=None,
    points_per_win=3,
    points_per_draw=1,
    points_per_loss=0,
    points_per_goal_scored=0,
    points_per_goal_conceded=0,
    created=DUMMY_MOCK_TIME,
    updated=DUMMY_MOCK_TIME,
)

DUMMY_STAGE = StagePoint(
    id=StagePointId(11),
    template_id=PointSystemTemplateId(7),
    stage_name="Final",
    stage_order=1,
    points_per_win=10,
    points_per_draw=4,
    points_per_loss=2,
    points_per_goal_scored=0,
    points_per_goal_conceded=0,
)

DUMMY_RULE = ConditionalRule(
    id=ConditionalRuleId(21),
    template_id=PointSystemTemplateId(7),
    condition_type=RuleConditionType.GOALS_SCORED_THRESHOLD,
    operator=ComparisonOperator.GREATER_THAN,
    threshold=3,
    point_adjustment=1,
    created=DUMMY_MOCK_TIME,
)

DUMMY_TEMPLATE = FullPointSystemTemplate(
    id=PointSystemTemplateId(7),
    name="League scoring",
    description=None,
    points_per_win=3,
    points_per_draw=1,
    points_per_loss=0,
    points_per_goal_scored=1,
    points_per_goal_conceded=-1,
    points_for_walkover_win=3,
    points_for_walkover_loss=-3,
    points_per_stage_win=0,
    points_per_stage_draw=0,
    points_per_clean_sheet=0,
    created=DUMMY_MOCK_TIME,
    updated=DUMMY_MOCK_TIME,
    stage_points=[DUMMY_STAGE],
    conditional_rules=[DUMMY_RULE],
)

DUMMY_TOURNAMENT_WITH_TEMPLATE = DUMMY_TOURNAMENT.model_copy(
    update={"id": TournamentId(2), "point_system_template_id": DUMMY_TEMPLATE.id}
)


def dummy_player(player_id: int, name: str, club_id: int | None = 1) -> PlayerWithClub:
    return PlayerWithClub(
        id=PlayerId(player_id),
        name=name,
        club_id=ClubId(club_id) if club_id is not None else None,
        club_name=DUMMY_CLUB.name if club_id is not None else None,
        roles=[PlayerRole.PLAYER],
        created=DUMMY_MOCK_TIME,
        updated=DUMMY_MOCK_TIME,
    )


def dummy_result(
    result_id: int,
    player_id: int,
    outcome: MatchOutcome,
    goals_scored: int,
    goals_conceded: int,
    *,
    match_id: int = 1,
    base_points: int = 0,
    conditional_points: int = 0,
    stage_id: int | None = None,
) -> MatchResultWithStage:
    return MatchResultWithStage(
        id=MatchResultId(result_id),
        match_id=MatchId(match_id),
        player_id=PlayerId(player_id),
        outcome=outcome,
        goals_scored=goals_scored,
        goals_conceded=goals_conceded,
        base_points=base_points,
        conditional_points=conditional_points,
        points_earned=base_points + conditional_points,
        created=DUMMY_MOCK_TIME,
        stage_id=StagePointId(stage_id) if stage_id is not None else None,
    )
